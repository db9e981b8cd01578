"""
URL routing for sites app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('public/sites/<slug:subdomain>/pages/<slug:slug>/', views.public_page, name='public-page'),
    path('cache/invalidate/', views.invalidate_cache, name='cache-invalidate'),
]
