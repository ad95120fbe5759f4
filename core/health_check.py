# core/health_check.py
import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


@require_http_methods(["GET", "HEAD"])
def health_check(request):
    """
    Lightweight health check endpoint for uptime monitoring.
    Returns 200 when the app and its database answer, 503 otherwise.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse(
            {
                'status': 'error',
                'message': 'Database unavailable'
            },
            status=503
        )
    return JsonResponse(
        {
            'status': 'ok',
            'message': 'Clinic dashboard is running'
        },
        status=200
    )
