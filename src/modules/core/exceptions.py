"""Domain error taxonomy and the DRF exception handler.

Service layers raise subclasses of ``DomainError``; each carries the HTTP
status and a machine-readable code so the API layer never needs to know
which service raised it.  Every error response, domain or DRF, is rendered
in the same shape::

    {
        "type": "client_error",
        "errors": [{"code": "not_found", "detail": "...", "attr": null}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "domain_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail or self.__class__.__doc__ or self.code


class BadRequest(DomainError):
    """The request cannot be fulfilled as issued."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"


class NotFound(DomainError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


# ---------------------------------------------------------------------------
# Exception handler
# ---------------------------------------------------------------------------


def standardized_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    """Render domain and DRF errors in a single response format.

    Anything else returns ``None`` so Django produces a 500 and the
    exception propagates to the logs.
    """
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=exc.__class__.__name__,
            code=exc.code,
            status_code=exc.status_code,
        )
        return Response(
            {
                "type": "client_error",
                "errors": [{"code": exc.code, "detail": exc.detail, "attr": None}],
            },
            status=exc.status_code,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        error_type = "validation_error"
        errors = _flatten_validation_errors(exc.detail)
    else:
        error_type = "client_error" if response.status_code < 500 else "server_error"
        code = exc.get_codes() if isinstance(exc, APIException) else "error"
        detail = getattr(exc, "detail", str(exc))
        # SimpleJWT wraps token errors in a dict with its own code
        if isinstance(detail, dict):
            code = detail.get("code", "error")
            detail = detail.get("detail", "")
        errors = [{"code": str(code), "detail": str(detail), "attr": None}]

    response.data = {"type": error_type, "errors": errors}
    return response


def _flatten_validation_errors(
    detail: Any, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            nested = key if key != "non_field_errors" else None
            if attr is not None and nested is not None:
                nested = f"{attr}.{nested}"
            errors.extend(_flatten_validation_errors(value, nested or attr))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                nested = f"{attr}.{index}" if attr else str(index)
                errors.extend(_flatten_validation_errors(value, nested))
            else:
                errors.extend(_flatten_validation_errors(value, attr))
        return errors
    return [
        {
            "code": getattr(detail, "code", "invalid"),
            "detail": str(detail),
            "attr": attr,
        }
    ]
