from django.urls import path
from .views import dashboard_stats, dashboard_orders, upcoming_deliveries

urlpatterns = [
    path('dashboard/stats/', dashboard_stats, name='dashboard-stats'),
    path('dashboard/orders/', dashboard_orders, name='dashboard-orders'),
    path('dashboard/upcoming-deliveries/', upcoming_deliveries, name='dashboard-upcoming-deliveries'),
]
