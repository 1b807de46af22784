"""Mapping of domain errors to HTTP responses.

Installed as the REST framework ``EXCEPTION_HANDLER``. Only the error code
and the user-safe message leave the process.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from community.domain import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
}


def domain_exception_handler(exc, context):
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    http_status = STATUS_BY_CODE[exc.code]
    request = context.get("request")
    if exc.code is ErrorCode.UNAUTHORIZED and request is not None and request.user is None:
        http_status = status.HTTP_401_UNAUTHORIZED

    logger.debug("Domain error %s mapped to %d", exc, http_status)
    return Response({"code": exc.code.value, "message": exc.message}, status=http_status)
