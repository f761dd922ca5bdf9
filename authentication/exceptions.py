# exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    400: 'Validation error',
    401: 'Authentication required',
    403: 'Permission denied',
    404: 'Resource not found',
    405: 'Method not allowed',
    500: 'Internal server error',
    503: 'Record store unavailable',
}


def error_body(status_code, details, message=None):
    """Envelope shared by every error response of the API"""
    return {
        'error': True,
        'message': message or STATUS_MESSAGES.get(status_code, 'An error occurred'),
        'details': details,
        'status_code': status_code,
    }


def custom_exception_handler(exc, context):
    """
    Wrap every API error as ``{error, message, details, status_code}``.

    DRF exceptions keep their status code and payload (under ``details``).
    Django validation and integrity errors become 400s, any other database
    failure a 503, and everything else a 500.
    """
    response = exception_handler(exc, context)

    if response is not None:
        if response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
            logger.error(f"Store unavailable: {exc}", exc_info=exc.__cause__ or exc)
        response.data = error_body(response.status_code, response.data)
        return response

    if isinstance(exc, ValidationError):
        logger.warning(f"Validation Error: {exc}")
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return Response(error_body(400, details), status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        return Response(
            error_body(400, {'error': 'This operation violates database constraints'}, 'Database integrity error'),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, DatabaseError):
        logger.exception(f"Database Error: {exc}")
        return Response(
            error_body(503, {'error': str(exc)} if settings.DEBUG else {}),
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    logger.exception(f"Unexpected Error: {exc}")
    return Response(
        error_body(500, {'error': str(exc)} if settings.DEBUG else {}, 'An unexpected error occurred'),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
