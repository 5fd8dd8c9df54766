from django.urls import path
from .views import party_list_create, party_detail

urlpatterns = [
    path('parties/', party_list_create, name='party-list-create'),
    path('parties/<int:pk>/', party_detail, name='party-detail'),
]
