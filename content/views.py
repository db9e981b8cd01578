"""
Content generation job endpoints.

POST /api/v1/sites/{site_id}/generate-content/     - Generate a whole site
POST /api/v1/pages/{page_id}/generate-content/     - Generate one page
POST /api/v1/sections/{section_id}/regenerate/     - Regenerate one section
GET  /api/v1/content-jobs/{job_id}/                - Check job status
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from sites.models import Page, Site
from .connections import get_connections
from .jobs import GenerationJob
from .models import Section
from .serializers import GenerateContentSerializer, RegenerateSectionSerializer

logger = logging.getLogger(__name__)

GENERATION_FAILED = 'Content generation failed'


def _enqueue(job: GenerationJob):
    job_id = get_connections().queue.enqueue(job)
    if job_id is None:
        return Response({'error': GENERATION_FAILED}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    logger.info(f"Content job {job_id} queued: {job.as_payload()}")
    return Response({'job_id': job_id, 'status': 'queued'}, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def generate_site_content(request, site_id):
    """
    Queue generation for every section of every page of a site.

    POST /api/v1/sites/{site_id}/generate-content/
    Body: { "language": "es", "regenerate": false }  (both optional)
    """
    site = get_object_or_404(Site, pk=site_id, user=request.user)
    serializer = GenerateContentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    return _enqueue(GenerationJob(
        site_id=site.pk,
        language=serializer.validated_data.get('language'),
        regenerate=serializer.validated_data['regenerate'],
    ))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def generate_page_content(request, page_id):
    """
    POST /api/v1/pages/{page_id}/generate-content/
    """
    page = get_object_or_404(Page.objects.select_related('site'), pk=page_id, site__user=request.user)
    serializer = GenerateContentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    return _enqueue(GenerationJob(
        site_id=page.site_id,
        page_id=page.pk,
        language=serializer.validated_data.get('language'),
        regenerate=serializer.validated_data['regenerate'],
    ))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def regenerate_section(request, section_id):
    """
    Regenerate one section even when it already has content.

    POST /api/v1/sections/{section_id}/regenerate/
    Body: { "language": "fr" }  (optional; all site languages when omitted)
    """
    section = get_object_or_404(
        Section.objects.select_related('page'),
        pk=section_id,
        page__site__user=request.user,
    )
    serializer = RegenerateSectionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    return _enqueue(GenerationJob(
        site_id=section.page.site_id,
        section_id=section.pk,
        language=serializer.validated_data.get('language'),
        regenerate=True,
    ))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_content_job_status(request, job_id):
    """
    Get status of a content generation job.

    GET /api/v1/content-jobs/{job_id}/
    Job ids are unguessable UUIDs, and the queue keeps no owner, so any
    authenticated operator holding an id can read its status.
    """
    job = get_connections().queue.get_status(job_id)
    if job is None:
        return Response({'error': 'Job not found'}, status=status.HTTP_404_NOT_FOUND)

    return Response(job.as_dict())
