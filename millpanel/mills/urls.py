from django.urls import path
from .views import (
    mill_list_create, mill_active_list, mill_detail,
    mill_input_list_create, mill_input_detail,
    mill_output_list_create, mill_output_stats, mill_output_detail,
    dispatch_list_create, dispatch_detail,
)

urlpatterns = [
    # Mill endpoints
    path('mills/', mill_list_create, name='mill-list-create'),
    path('mills/active/', mill_active_list, name='mill-active-list'),
    path('mills/<int:pk>/', mill_detail, name='mill-detail'),

    # Mill input endpoints
    path('mill-inputs/', mill_input_list_create, name='mill-input-list-create'),
    path('mill-inputs/<int:pk>/', mill_input_detail, name='mill-input-detail'),

    # Mill output endpoints
    path('mill-outputs/', mill_output_list_create, name='mill-output-list-create'),
    path('mill-outputs/stats/', mill_output_stats, name='mill-output-stats'),
    path('mill-outputs/<int:pk>/', mill_output_detail, name='mill-output-detail'),

    # Dispatch endpoints
    path('dispatches/', dispatch_list_create, name='dispatch-list-create'),
    path('dispatches/<int:pk>/', dispatch_detail, name='dispatch-detail'),
]
