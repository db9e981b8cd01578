"""
API URL routing for tourism_cms.
All API endpoints are prefixed with /api/v1/
"""
from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import health_check

urlpatterns = [
    path('health/', health_check, name='health-check'),
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('', include('content.urls')),
    path('', include('sites.urls')),
]
