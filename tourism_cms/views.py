"""
Project-level views: health check and JSON error handlers.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from content.connections import get_connections


@require_GET
def health_check(request):
    """
    GET /api/v1/health/ - no authentication.

    Reports whether background generation and the site cache are wired up;
    the app stays healthy without either.
    """
    connections = get_connections()
    return JsonResponse({
        "status": "ok",
        "service": "tourism-cms",
        "queue": "enabled" if connections.queue.enabled else "disabled",
        "cache": "enabled" if connections.cache.enabled else "disabled",
    })


def not_found(request, exception=None):
    return JsonResponse({'error': 'Not found', 'status': 404}, status=404)


def server_error(request):
    return JsonResponse({'error': 'Internal server error', 'status': 500}, status=500)
