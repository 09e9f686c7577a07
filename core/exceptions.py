import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

# DRF's own codes folded into the ones clients already handle
CODE_ALIASES = {
    'not_authenticated': 'unauthenticated',
    'authentication_failed': 'unauthenticated',
    'permission_denied': 'forbidden',
    'not_found': 'not_found',
}


class InternalError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal Server Error'
    default_code = 'internal_error'


def api_exception_handler(exc, context):
    """
    Render every error as {"error": <code>, "message": <text>}.

    Anything that is not an APIException is logged with its traceback and
    reported as internal_error so store or library details never reach the client.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {str(exc)}")
        return Response(
            {'error': InternalError.default_code, 'message': InternalError.default_detail},
            status=InternalError.status_code,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            'error': 'validation_error',
            'message': 'Invalid input.',
            'details': response.data,
        }
        return response

    code = getattr(exc, 'default_code', None) or 'error'
    detail = getattr(exc, 'detail', None)
    response.data = {
        'error': CODE_ALIASES.get(code, code),
        'message': str(detail) if detail is not None else '',
    }
    return response
