from django.urls import path
from .views import order_list_create, order_detail, order_by_order_id, order_status, order_logs

urlpatterns = [
    path('orders/', order_list_create, name='order-list-create'),
    path('orders/by-order-id/<str:order_id>/', order_by_order_id, name='order-by-order-id'),
    path('orders/<int:pk>/', order_detail, name='order-detail'),
    path('orders/<int:pk>/status/', order_status, name='order-status'),
    path('orders/<int:pk>/logs/', order_logs, name='order-logs'),
]
