from django.http import JsonResponse


def health_check(request):
    """Liveness probe for the load balancer."""
    return JsonResponse({'success': True, 'status': 'ok'})


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'success': False,
        'message': 'Not found',
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'success': False,
        'message': 'Internal server error',
    }, status=500)
