"""Mapping from domain errors to HTTP responses."""

import logging

from rest_framework import status
from rest_framework.response import Response

from events.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CHECK_IN_SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_FULL: status.HTTP_409_CONFLICT,
    ErrorCode.CHECK_IN_SESSION_CLOSED: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    http_status = STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if http_status >= 500:
        logger.error("Unmapped domain error: %s", error)
    else:
        logger.info("Request rejected: %s", error)
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=http_status,
    )
