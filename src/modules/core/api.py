"""Helpers shared by the API views of every module."""

from __future__ import annotations

from typing import Dict, Type

import structlog
from rest_framework import status
from rest_framework.response import Response

from shared.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidInput,
    InvalidState,
    NotFound,
)

logger = structlog.get_logger(__name__)

STATUS_BY_KIND: Dict[Type[DomainError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    InvalidState: status.HTTP_409_CONFLICT,
    Conflict: status.HTTP_409_CONFLICT,
}


def domain_error_response(exc: DomainError, status_code: int | None = None) -> Response:
    """Translate a domain error into ``{"detail", "code"}`` with its status.

    ``status_code`` overrides the default mapping of the error kind.
    """
    if status_code is None:
        status_code = next(
            (code for kind, code in STATUS_BY_KIND.items() if isinstance(exc, kind)),
            status.HTTP_400_BAD_REQUEST,
        )
    logger.info(
        "api.domain_error",
        error=type(exc).__name__,
        code=exc.code,
        status_code=status_code,
    )
    return Response({"detail": exc.message, "code": exc.code}, status=status_code)
