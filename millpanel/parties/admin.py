from django.contrib import admin
from .models import Party


@admin.register(Party)
class PartyAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_name', 'contact_phone', 'created_at']
    search_fields = ['name', 'contact_name', 'contact_phone']
    ordering = ['name']
