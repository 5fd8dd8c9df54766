"""
URL configuration for the millpanel project.

Every API route lives under /api/v1/; each app contributes its own urls module.
"""
from django.contrib import admin
from django.urls import path, include
from millpanel.core.views import manifest

admin.site.site_header = "MillPanel Admin"
admin.site.site_title = "MillPanel Admin Portal"
admin.site.index_title = "Textile back-office administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('manifest.json', manifest, name='manifest'),
    path('api/v1/', include('millpanel.core.urls')),
    path('api/v1/', include('millpanel.parties.urls')),
    path('api/v1/', include('millpanel.catalog.urls')),
    path('api/v1/', include('millpanel.orders.urls')),
    path('api/v1/', include('millpanel.labs.urls')),
    path('api/v1/', include('millpanel.mills.urls')),
    path('api/v1/', include('millpanel.dashboard.urls')),
]
