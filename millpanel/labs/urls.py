from django.urls import path
from .views import (
    lab_list_create, lab_detail, labs_by_order, lab_form, lab_submit,
    labs_delete_by_order, labs_seed_from_order, lab_item,
)

urlpatterns = [
    path('labs/', lab_list_create, name='lab-list-create'),
    path('labs/<int:pk>/', lab_detail, name='lab-detail'),
    path('labs/by-order/<int:order_pk>/', labs_by_order, name='labs-by-order'),
    path('labs/by-order/<int:order_pk>/form/', lab_form, name='lab-form'),
    path('labs/by-order/<int:order_pk>/submit/', lab_submit, name='lab-submit'),
    path('labs/delete-by-order/<int:order_pk>/', labs_delete_by_order, name='labs-delete-by-order'),
    path('labs/seed-from-order/<int:order_pk>/', labs_seed_from_order, name='labs-seed-from-order'),
    path('labs/order/<int:order_pk>/items/<int:item_pk>/', lab_item, name='lab-item'),
]
