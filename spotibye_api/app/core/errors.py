"""
Error taxonomy and the uniform error envelope.

Failures reach a client as one of:

* ``ValidationFailed`` (HTTP 400): request fields violate the
  required/length constraints.  Carries a field -> message map.
* ``NotFound`` (HTTP 404): the referenced track identifier does not
  exist.  Raised by the service layer after a failed lookup.
* Framework HTTP errors (unknown route, method not allowed, ...) keep
  their status code and reason phrase.
* ``Unexpected`` (HTTP 500): anything else.  The message sent to the
  client is a fixed phrase; details only go to the log.

``build_error_response`` maps an exception to ``(status_code, body)``.
It has no side effects so it can be called from any transport.
"""

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from fastapi import status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

UNEXPECTED_MESSAGE = "An unexpected error occurred"


class FieldError(NamedTuple):
    """A single validation failure for one input field."""

    field: str
    message: str


class TrackValidationError(ValueError):
    """Raised when request fields fail validation."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        super().__init__("Validation failed")

    def as_dict(self) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for error in self.errors:
            # Keep the first message reported for a field
            result.setdefault(error.field, error.message)
        return result


class TrackNotFoundError(LookupError):
    """Raised when no track exists for the given identifier."""

    def __init__(self, track_id: int) -> None:
        self.track_id = track_id
        super().__init__(f"Track not found with ID: {track_id}")


def _request_validation_errors(exc: RequestValidationError) -> List[FieldError]:
    errors = []
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1] if loc else "body"
        errors.append(FieldError(field, item.get("msg", "Invalid value")))
    return errors


def build_error_response(
    exc: Exception,
    path: str,
    now: Optional[datetime] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Classify ``exc`` and build the error envelope for it.

    Returns
    -------
    tuple
        ``(status_code, body)`` where ``body`` contains ``timestamp``,
        ``status``, ``error``, ``message`` and ``path``; validation
        failures additionally carry an ``errors`` map.
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    if isinstance(exc, RequestValidationError):
        exc = TrackValidationError(_request_validation_errors(exc))

    if isinstance(exc, TrackValidationError):
        code = status.HTTP_400_BAD_REQUEST
        return code, {
            "timestamp": timestamp,
            "status": code,
            "error": "Validation Failed",
            "message": str(exc),
            "errors": exc.as_dict(),
            "path": path,
        }

    if isinstance(exc, StarletteHTTPException):
        # Routing failures (unknown path, wrong method) keep their own status
        code = exc.status_code
        try:
            phrase = HTTPStatus(code).phrase
        except ValueError:
            phrase = "Error"
        return code, {
            "timestamp": timestamp,
            "status": code,
            "error": phrase,
            "message": exc.detail if isinstance(exc.detail, str) else phrase,
            "path": path,
        }

    if isinstance(exc, TrackNotFoundError):
        code = status.HTTP_404_NOT_FOUND
        return code, {
            "timestamp": timestamp,
            "status": code,
            "error": "Not Found",
            "message": str(exc),
            "path": path,
        }

    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return code, {
        "timestamp": timestamp,
        "status": code,
        "error": "Internal Server Error",
        "message": UNEXPECTED_MESSAGE,
        "path": path,
    }
