"""DRF exception handler that renders framework errors in the API envelope.

Domain errors are translated by the views themselves; this handler covers
what DRF raises on its own: authentication failures, request body
validation, unsupported methods, throttling and 404s.
"""

import logging

from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def envelope_exception_handler(exc, context):
    """Rewrite DRF's error payloads as ``{success: false, message}``."""
    response = exception_handler(exc, context)
    if response is None:
        # Not an API exception; let Django produce a 500
        return None

    original = response.data
    payload = {
        'success': False,
        'message': flatten_error_detail(original),
    }
    if isinstance(exc, ValidationError):
        payload['errors'] = original
    response.data = payload

    request = context.get('request')
    logger.info(
        "%s on %s: %s",
        exc.__class__.__name__,
        request.path if request is not None else '-',
        payload['message'],
    )
    return response


def flatten_error_detail(detail) -> str:
    """Collapse DRF's nested error structure into one readable line."""
    if isinstance(detail, dict):
        if set(detail) == {'detail'}:
            return flatten_error_detail(detail['detail'])
        parts = []
        for field, value in detail.items():
            message = flatten_error_detail(value)
            if field in ('non_field_errors', 'detail'):
                parts.append(message)
            else:
                parts.append(f"{field}: {message}")
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return ' '.join(flatten_error_detail(item) for item in detail)
    return str(detail)
