"""
Public read path and cache invalidation.

GET  /api/v1/public/sites/{subdomain}/pages/{slug}/?language=es - Rendered page content
POST /api/v1/cache/invalidate/                                - Drop cached reads for an object
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from content.connections import get_connections
from content.models import Section
from .models import Page, Site
from .serializers import CacheInvalidationSerializer

logger = logging.getLogger(__name__)


def served_language(site, requested):
    """
    Language the page is rendered and cached under.

    Anything outside the site's languages collapses to the default language,
    so cache keys stay within the set that invalidation enumerates.
    """
    default = site['default_language']
    if requested and (requested == default or requested in (site.get('languages') or [])):
        return requested
    return default


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_page(request, subdomain, slug):
    """
    Page content for the website app, read through the cache.

    Falls back to the site's default language for sections that have no
    content in the requested one.
    """
    cache = get_connections().cache

    site = cache.get_site_by_subdomain(subdomain)
    if site is None:
        return Response({'error': 'Site not found'}, status=status.HTTP_404_NOT_FOUND)

    page_summary = next((p for p in cache.get_site_pages(site['id']) if p['slug'] == slug), None)
    if page_summary is None:
        return Response({'error': 'Page not found'}, status=status.HTTP_404_NOT_FOUND)

    language = served_language(site, request.query_params.get('language'))
    page = Page.objects.select_related('site').filter(pk=page_summary['id'], site_id=site['id']).first()
    if page is None:
        return Response({'error': 'Page not found'}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'site': site,
        'page': cache.get_page_content(page, language),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invalidate_cache(request):
    """
    POST /api/v1/cache/invalidate/
    Body: { "type": "site" | "page" | "section", "id": 123 }
    """
    serializer = CacheInvalidationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    kind = serializer.validated_data['type']
    object_id = serializer.validated_data['id']
    cache = get_connections().cache

    if kind == 'site':
        target = get_object_or_404(Site, pk=object_id, user=request.user)
        invalidated = cache.invalidate_site(target)
    elif kind == 'page':
        target = get_object_or_404(Page.objects.select_related('site'), pk=object_id, site__user=request.user)
        invalidated = cache.invalidate_page(target)
    else:
        target = get_object_or_404(
            Section.objects.select_related('page__site'), pk=object_id, page__site__user=request.user
        )
        invalidated = cache.invalidate_section(target)

    logger.info(f"Cache invalidation for {kind} {object_id}: {'ok' if invalidated else 'skipped'}")
    return Response({'type': kind, 'id': object_id, 'invalidated': invalidated})
