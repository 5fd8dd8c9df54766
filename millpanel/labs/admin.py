from django.contrib import admin
from .models import Lab


@admin.register(Lab)
class LabAdmin(admin.ModelAdmin):
    list_display = ['sample_number', 'order', 'order_item', 'lab_send_date', 'approval_date', 'status', 'soft_deleted']
    list_filter = ['status', 'soft_deleted', 'lab_send_date']
    search_fields = ['sample_number', 'lab_send_number', 'order__order_id', 'remarks']
    ordering = ['-created_at']
