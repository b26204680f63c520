import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render every API error as ``{"success": False, "error": ...}``.

    Services signal ownership problems with ``PermissionError`` and rule
    violations with ``ValueError``; both become client errors here.
    """
    view = context.get('view')
    view_name = type(view).__name__ if view is not None else 'unknown'

    if isinstance(exc, PermissionError):
        logger.warning('%s refused: %s', view_name, exc)
        return Response({'success': False, 'error': str(exc)}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, ValueError):
        logger.info('%s rejected request: %s', view_name, exc)
        return Response({'success': False, 'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        return None
    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    if detail is not None:
        response.data = {'success': False, 'error': str(detail)}
    else:
        response.data = {'success': False, 'error': 'Invalid request.', 'errors': response.data}
    return response
