"""
Django admin configuration for Order Fulfillment.
"""

from django.contrib import admin
from .models import Order, OrderItem, PickTask, AuditLog


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['line_number', 'sku', 'bin_location', 'quantity', 'picked_quantity', 'verified_quantity', 'status']
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'customer_id', 'status', 'priority', 'picker', 'packer', 'total_amount', 'created_at']
    list_filter = ['status', 'priority', 'created_at']
    search_fields = ['order_number', 'customer_id', 'customer_name', 'picker__username']
    readonly_fields = ['id', 'order_number', 'created_at', 'updated_at']
    inlines = [OrderItemInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ['order', 'line_number', 'sku', 'quantity', 'picked_quantity', 'verified_quantity', 'status']
    list_filter = ['status', 'order__status']
    search_fields = ['sku', 'order__order_number']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(PickTask)
class PickTaskAdmin(admin.ModelAdmin):
    list_display = ['task_number', 'order', 'sequence', 'sku', 'target_bin', 'picker', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['task_number', 'order__order_number', 'sku', 'picker__username']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['entity_type', 'entity_id', 'action', 'user', 'timestamp']
    list_filter = ['entity_type', 'action', 'timestamp']
    search_fields = ['entity_id', 'notes', 'user__username']
    readonly_fields = ['id', 'timestamp']
