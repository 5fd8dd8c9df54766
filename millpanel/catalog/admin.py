from django.contrib import admin
from .models import Quality, Fabric


@admin.register(Quality)
class QualityAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Fabric)
class FabricAdmin(admin.ModelAdmin):
    list_display = ['quality_code', 'quality_name', 'weaver', 'weaver_quality_name', 'gsm', 'greigh_rate']
    list_filter = ['weaver']
    search_fields = ['quality_code', 'quality_name', 'weaver', 'weaver_quality_name']
    ordering = ['quality_code']
    readonly_fields = ['label', 'created_at', 'updated_at']
