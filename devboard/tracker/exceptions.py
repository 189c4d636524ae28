# ============================================
# tracker/exceptions.py
# ============================================
"""
Error types raised by the tracker services and the DRF exception handler
that turns them (and Django's own exceptions) into ``{"detail": ...}`` bodies.
"""
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

NotFound = exceptions.NotFound


class Conflict(exceptions.APIException):
    """A concurrent writer won the race and the bounded retries ran out."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The resource was modified concurrently, please retry.'
    default_code = 'conflict'


class InvalidTransition(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid workflow transition.'
    default_code = 'invalid_transition'


class InvalidInput(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid'


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = InvalidInput(' '.join(exc.messages))
    elif isinstance(exc, ObjectDoesNotExist):
        exc = NotFound(str(exc) or None)
    return exception_handler(exc, context)
