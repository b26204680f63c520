from rest_framework import status
from rest_framework.response import Response


def first_error(form) -> str:
    for errors in form.errors.values():
        for error in errors:
            return error
    return 'Invalid request.'


def form_error_response(form, status_code=status.HTTP_400_BAD_REQUEST) -> Response:
    return Response(
        {'success': False, 'error': first_error(form), 'errors': form.errors},
        status=status_code,
    )


def parse_bool(raw):
    """Return ``True``/``False`` for boolean-ish payload values, ``None`` otherwise."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.lower() in ('true', 'false', '1', '0'):
        return raw.lower() in ('true', '1')
    return None


def parse_positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default
