from django.contrib import admin
from .models import Order, OrderItem, OrderCounter


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'order_type', 'party', 'arrival_date', 'delivery_date', 'status', 'created_at']
    list_filter = ['order_type', 'status', 'arrival_date']
    search_fields = ['order_id', 'po_number', 'style_no', 'party__name']
    ordering = ['-created_at']
    readonly_fields = ['order_id', 'created_at', 'updated_at']
    inlines = [OrderItemInline]


@admin.register(OrderCounter)
class OrderCounterAdmin(admin.ModelAdmin):
    list_display = ['name', 'value']
