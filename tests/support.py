import os
import tempfile
from unittest import mock

from spotibye_api.app.core.config import settings
from spotibye_api.app.core.db import init_db


class TempDatabaseMixin:
    """Point the application at a fresh SQLite file for each test."""

    def setUp(self) -> None:
        super().setUp()
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        patcher = mock.patch.object(settings, "database_url", os.path.join(tmpdir.name, "tracks.db"))
        patcher.start()
        self.addCleanup(patcher.stop)
        init_db()


def track_payload(**overrides):
    payload = {
        "title": "Test Track",
        "artist": "Test Artist",
        "category": "Pop",
        "audioUrl": "http://x/a.mp3",
        "duration": 180,
    }
    payload.update(overrides)
    return payload
