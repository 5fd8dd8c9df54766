from django.urls import path
from .views import (
    LoginView, PanelTokenRefreshView, user_me, logout, profile,
    user_list_create, user_detail,
    audit_log_list, audit_log_detail, audit_log_stats, audit_log_count,
    health,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', PanelTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/logout/', logout, name='logout'),
    path('profile/', profile, name='profile'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # AuditLog endpoints
    path('logs/', audit_log_list, name='audit-log-list'),
    path('logs/stats/', audit_log_stats, name='audit-log-stats'),
    path('logs/count/', audit_log_count, name='audit-log-count'),
    path('logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    path('health/', health, name='health'),
]
