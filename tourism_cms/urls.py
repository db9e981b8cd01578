"""
URL configuration for tourism_cms project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('tourism_cms.api_urls')),
]

# JSON instead of HTML error pages
handler404 = 'tourism_cms.views.not_found'
handler500 = 'tourism_cms.views.server_error'
