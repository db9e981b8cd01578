"""
URL routing for content app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('sites/<int:site_id>/generate-content/', views.generate_site_content, name='site-generate-content'),
    path('pages/<int:page_id>/generate-content/', views.generate_page_content, name='page-generate-content'),
    path('sections/<int:section_id>/regenerate/', views.regenerate_section, name='section-regenerate'),
    path('content-jobs/<str:job_id>/', views.get_content_job_status, name='content-job-status'),
]
