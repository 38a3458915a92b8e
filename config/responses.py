"""Response envelope shared by every API view.

Successful responses carry ``success: true`` plus ``data`` and any extra
top-level keys (``count``, ``pagination``...). Failures carry
``success: false`` and a human-readable ``message``.
"""

from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, *, status_code=status.HTTP_200_OK, **extra) -> Response:
    """Wrap ``data`` in the success envelope."""
    payload = {'success': True}
    payload.update(extra)
    if data is not None:
        payload['data'] = data
    return Response(payload, status=status_code)


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST) -> Response:
    """Wrap an error message in the failure envelope."""
    return Response(
        {'success': False, 'message': str(message)},
        status=status_code,
    )
