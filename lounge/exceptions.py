import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)


class StateConflict(APIException):
    """The operation is not valid for the entity's current status."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Operation not allowed in the current state'
    default_code = 'state_conflict'


def flatten_errors(detail, prefix=''):
    """Turn DRF's nested error detail into ``[{field, message}, ...]``."""
    errors = []
    if isinstance(detail, dict):
        for field, value in detail.items():
            name = f"{prefix}.{field}" if prefix else str(field)
            if field == 'non_field_errors' and not prefix:
                name = 'non_field_errors'
            errors.extend(flatten_errors(value, name))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                errors.extend(flatten_errors(value, f"{prefix}[{index}]"))
            else:
                errors.append({'field': prefix or 'non_field_errors', 'message': str(value)})
    else:
        errors.append({'field': prefix or 'non_field_errors', 'message': str(detail)})
    return errors


def api_exception_handler(exc, context):
    """Render every error as ``{success: false, message, errors?}``."""
    set_rollback()
    if isinstance(exc, ValidationError):
        errors = flatten_errors(exc.detail)
        view = context.get('view')
        logger.info("Validation failed in %s: %s", type(view).__name__, errors)
        return Response(
            {'success': False, 'message': 'Validation failed', 'errors': errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, Http404):
        return Response({'success': False, 'message': 'Not found'}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, DjangoPermissionDenied):
        return Response({'success': False, 'message': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)

    if isinstance(exc, APIException):
        headers = {}
        auth_header = getattr(exc, 'auth_header', None)
        if auth_header:
            headers['WWW-Authenticate'] = auth_header
        wait = getattr(exc, 'wait', None)
        if wait:
            headers['Retry-After'] = '%d' % wait
        return Response(
            {'success': False, 'message': str(exc.detail)},
            status=exc.status_code,
            headers=headers,
        )

    logger.exception("Unhandled error in %s", type(context.get('view')).__name__)
    body = {'success': False, 'message': 'Something went wrong!'}
    if settings.DEBUG:
        body['error'] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class InvalidCredentials(APIException):
    """Login rejected; raised from views that run without authenticators."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'
