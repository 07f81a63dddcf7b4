"""
Exception handlers mapping contact point errors to HTTP responses for whichever FastAPI application mounts the service, so each error kind keeps a distinct status code. The service itself serves no HTTP: `register_contact_point_error_handlers` is the surface a host application calls on its FastAPI app.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from services.alerting.errors import (
    ConcurrencyConflictError,
    ContactPointError,
    ContactPointNotFoundError,
    DuplicateIdentityError,
    InUseError,
    PermissionDeniedError,
    ProvenanceViolationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: Dict[Type[ContactPointError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ProvenanceViolationError: status.HTTP_400_BAD_REQUEST,
    InUseError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ContactPointNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateIdentityError: status.HTTP_409_CONFLICT,
    ConcurrencyConflictError: status.HTTP_409_CONFLICT,
}


def status_code_for(exc: ContactPointError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def contact_point_exception_handler(
    request: Request,
    exc: ContactPointError,
) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception("Unhandled contact point error: %s", exc)
        return JSONResponse(status_code=status_code, content={"detail": "Internal server error"})
    # permission errors never say whether the secret exists
    detail = "Permission denied" if isinstance(exc, PermissionDeniedError) else str(exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error": type(exc).__name__},
    )


def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_contact_point_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContactPointError, contact_point_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
