from django.contrib import admin
from .models import Mill, MillInput, MillOutput, Dispatch


@admin.register(Mill)
class MillAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'contact_phone', 'email', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'contact_person', 'contact_phone']
    ordering = ['name']


@admin.register(MillInput)
class MillInputAdmin(admin.ModelAdmin):
    list_display = ['chalan_no', 'order', 'mill', 'mill_date', 'greigh_mtr', 'pcs']
    list_filter = ['mill', 'mill_date']
    search_fields = ['chalan_no', 'order__order_id']
    ordering = ['-mill_date']


@admin.register(MillOutput)
class MillOutputAdmin(admin.ModelAdmin):
    list_display = ['mill_bill_no', 'order', 'recd_date', 'finished_mtr', 'mill_rate']
    list_filter = ['recd_date']
    search_fields = ['mill_bill_no', 'order__order_id']
    ordering = ['-recd_date']


@admin.register(Dispatch)
class DispatchAdmin(admin.ModelAdmin):
    list_display = ['bill_no', 'order', 'dispatch_date', 'finish_mtr', 'sale_rate', 'total_value']
    list_filter = ['dispatch_date']
    search_fields = ['bill_no', 'order__order_id']
    ordering = ['-dispatch_date']
    readonly_fields = ['total_value']
