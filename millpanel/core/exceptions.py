"""
API error envelope.

Every error leaves the API as {"success": false, "message": "..."}; serializer
errors are flattened into one message with the individual messages joined by ", ".
"""
import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_FIELD_PREFIXES = ('This field', 'Ensure this', 'A valid', 'Enter a valid', 'Invalid pk', 'Incorrect type', 'Date has wrong format', 'Datetime has wrong format')


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with an existing record.'
    default_code = 'conflict'


def flatten_errors(detail, field=None):
    """Collect every message in a DRF error structure, in order"""
    messages = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            nested_field = None if key in ('non_field_errors', 'detail', 'message') else key
            messages.extend(flatten_errors(value, nested_field))
    elif isinstance(detail, (list, tuple)):
        for value in detail:
            messages.extend(flatten_errors(value, field))
    elif detail is not None:
        message = str(detail)
        # DRF's stock messages do not say which field they belong to
        if field and message.startswith(GENERIC_FIELD_PREFIXES):
            message = f"{field}: {message}"
        messages.append(message)
    return messages


def error_message(detail):
    messages = list(dict.fromkeys(flatten_errors(detail)))
    return ', '.join(messages) or 'Request failed'


def api_exception_handler(exc, context):
    """DRF exception handler producing the {"success": false, "message": ...} envelope"""
    if isinstance(exc, ProtectedError):
        return Response(
            {'success': False, 'message': 'This record is referenced by other records and cannot be deleted'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error in {context.get('view')}: {exc}")
        return Response(
            {'success': False, 'message': 'A record with these values already exists'},
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)
    if response is None:
        logger.exception(f"Unhandled error in {context.get('view')}", exc_info=exc)
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response.data = {'success': False, 'message': error_message(response.data)}
    return response


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST):
    return Response({'success': False, 'message': message}, status=status_code)


def validation_error_response(errors):
    """Response for serializer.errors, in the same envelope as raised exceptions"""
    return error_response(error_message(errors))
