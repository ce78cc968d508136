"""
Domain errors for the appointments app and the project-wide DRF
exception handler that renders them.

Services raise the domain errors below; they carry their own HTTP
status so that views never need to translate them by hand.
"""
from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class AppointmentsError(Exception):
    """Base class for errors raised by the appointments service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'error'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(AppointmentsError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'


class PatientNotFound(NotFoundError):
    def __init__(self, ssn: str):
        self.ssn = ssn
        super().__init__(f"Patient with SSN '{ssn}' not found")


class AppointmentNotFound(NotFoundError):
    def __init__(self, ssn: str):
        self.ssn = ssn
        super().__init__(f"No appointments found for SSN '{ssn}'")


class ConflictError(AppointmentsError):
    status_code = status.HTTP_409_CONFLICT
    code = 'conflict'


class PatientConflict(ConflictError):
    """Raised when a concurrent writer holds the patient's natural key
    but the row cannot be read back."""

    def __init__(self, ssn: str):
        self.ssn = ssn
        super().__init__(f"Patient with SSN '{ssn}' is being created concurrently, retry the request")


def _error(code, message):
    return {'ok': False, 'error': {'code': code, 'message': message}}


def api_exception_handler(exc, context):
    if isinstance(exc, AppointmentsError):
        return Response(_error(exc.code, exc.message), status=exc.status_code)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'unknown view')
        message = str(exc) if settings.DEBUG else 'Internal server error'
        return Response(_error('server_error', message), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # normalize response, keeping headers such as WWW-Authenticate
    if isinstance(exc, ValidationError):
        code = 'validation_error'
        detail = resp.data
    else:
        code = getattr(exc, 'default_code', 'api_error')
        if isinstance(resp.data, dict):
            detail = resp.data.get('detail') or resp.data
        else:
            detail = str(resp.data)
    resp.data = _error(code, detail)
    return resp
