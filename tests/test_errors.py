import unittest
from datetime import datetime, timezone

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from spotibye_api.app.core.errors import (
    UNEXPECTED_MESSAGE,
    FieldError,
    TrackNotFoundError,
    TrackValidationError,
    build_error_response,
)

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestBuildErrorResponse(unittest.TestCase):
    def test_not_found(self) -> None:
        status, body = build_error_response(TrackNotFoundError(7), "/api/tracks/7", now=NOW)

        self.assertEqual(status, 404)
        self.assertEqual(
            body,
            {
                "timestamp": NOW.isoformat(),
                "status": 404,
                "error": "Not Found",
                "message": "Track not found with ID: 7",
                "path": "/api/tracks/7",
            },
        )

    def test_validation_failed_carries_field_map(self) -> None:
        exc = TrackValidationError([
            FieldError("title", "Title is required"),
            FieldError("title", "Title must be a string"),
            FieldError("duration", "Duration is required"),
        ])

        status, body = build_error_response(exc, "/api/tracks", now=NOW)

        self.assertEqual(status, 400)
        self.assertEqual(body["error"], "Validation Failed")
        self.assertEqual(body["errors"], {"title": "Title is required", "duration": "Duration is required"})
        self.assertEqual(body["path"], "/api/tracks")

    def test_request_validation_error_is_validation_failed(self) -> None:
        exc = RequestValidationError([
            {"loc": ("path", "track_id"), "msg": "Input should be a valid integer", "type": "int_parsing"},
        ])

        status, body = build_error_response(exc, "/api/tracks/abc", now=NOW)

        self.assertEqual(status, 400)
        self.assertEqual(body["errors"], {"track_id": "Input should be a valid integer"})

    def test_framework_http_error_keeps_status_and_phrase(self) -> None:
        status, body = build_error_response(
            StarletteHTTPException(status_code=405, detail="Method Not Allowed"), "/api/tracks/1", now=NOW
        )

        self.assertEqual(status, 405)
        self.assertEqual(
            body,
            {
                "timestamp": NOW.isoformat(),
                "status": 405,
                "error": "Method Not Allowed",
                "message": "Method Not Allowed",
                "path": "/api/tracks/1",
            },
        )

    def test_unexpected_error_hides_message(self) -> None:
        status, body = build_error_response(RuntimeError("disk I/O error at /var/db"), "/api/tracks", now=NOW)

        self.assertEqual(status, 500)
        self.assertEqual(body["error"], "Internal Server Error")
        self.assertEqual(body["message"], UNEXPECTED_MESSAGE)
        self.assertNotIn("errors", body)


if __name__ == "__main__":
    unittest.main()
