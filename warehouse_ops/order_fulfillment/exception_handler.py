"""
REST framework exception handler for Order Fulfillment.

Business exceptions become ``{"success": false, "error": {...}}`` responses
with a status that matches their kind. Everything else goes through DRF's
default handler and is wrapped in the same envelope.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import (
    BusinessException, ConflictException, NotFoundException,
    TransientStoreException, ValidationException
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND = [
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (ConflictException, status.HTTP_409_CONFLICT),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (TransientStoreException, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(code, message, details=None, status_code=status.HTTP_400_BAD_REQUEST, headers=None):
    return Response({
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'details': details or {},
        }
    }, status=status_code, headers=headers)


def fulfillment_exception_handler(exc, context):
    if isinstance(exc, BusinessException):
        status_code = status.HTTP_400_BAD_REQUEST
        for kind, kind_status in STATUS_BY_KIND:
            if isinstance(exc, kind):
                status_code = kind_status
                break
        headers = {'Retry-After': '1'} if isinstance(exc, TransientStoreException) else None
        if status_code >= 500:
            logger.warning(f"{exc.code}: {exc.message}")
        return error_response(exc.code, exc.message, exc.details, status_code, headers)

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    if isinstance(detail, dict) and set(detail) == {'detail'}:
        message, details = str(detail['detail']), {}
    else:
        message, details = 'Invalid input', detail
    if isinstance(exc, DRFValidationError):
        code = 'VALIDATION_ERROR'
    else:
        code = str(getattr(exc, 'default_code', 'error')).upper()
    response.data = {
        'success': False,
        'error': {'code': code, 'message': message, 'details': details},
    }
    return response
