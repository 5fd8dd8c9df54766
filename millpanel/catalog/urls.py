from django.urls import path
from .views import (
    quality_list_create, quality_detail,
    fabric_list_create, fabric_detail, fabric_bulk_delete,
    fabric_quality_names, fabric_weavers,
)

urlpatterns = [
    # Quality endpoints
    path('qualities/', quality_list_create, name='quality-list-create'),
    path('qualities/<int:pk>/', quality_detail, name='quality-detail'),

    # Fabric endpoints
    path('fabrics/', fabric_list_create, name='fabric-list-create'),
    path('fabrics/bulk-delete/', fabric_bulk_delete, name='fabric-bulk-delete'),
    path('fabrics/quality-names/', fabric_quality_names, name='fabric-quality-names'),
    path('fabrics/weavers/', fabric_weavers, name='fabric-weavers'),
    path('fabrics/<int:pk>/', fabric_detail, name='fabric-detail'),
]
