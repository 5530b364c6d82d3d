import logging
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path

from spotibye_api.app.core.logging_config import resolve_level, setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        root.handlers.clear()

        def restore() -> None:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        self.addCleanup(restore)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_file_handler_rotates(self) -> None:
        logfile = Path(self.tmp.name) / "logs" / "api.log"

        self.assertTrue(setup_logging("debug", str(logfile), max_bytes=1024, backup_count=2))

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        rotating = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        self.assertEqual(len(rotating), 1)
        self.assertEqual(rotating[0].maxBytes, 1024)
        self.assertEqual(rotating[0].backupCount, 2)

        logging.getLogger("spotibye_api.test").info("catalog ready")
        rotating[0].flush()
        self.assertIn("[INFO] spotibye_api.test: catalog ready", logfile.read_text(encoding="utf-8"))

    def test_second_call_changes_nothing(self) -> None:
        self.assertTrue(setup_logging("INFO"))
        handlers = logging.getLogger().handlers[:]

        self.assertFalse(setup_logging("DEBUG", str(Path(self.tmp.name) / "other.log")))

        self.assertEqual(logging.getLogger().handlers, handlers)
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_console_only_without_logfile(self) -> None:
        setup_logging("WARNING")
        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertNotIsInstance(handlers[0], logging.FileHandler)

    def test_server_loggers_propagate_to_root(self) -> None:
        setup_logging()
        access = logging.getLogger("uvicorn.access")
        self.assertTrue(access.propagate)
        self.assertEqual(access.handlers, [])

    def test_resolve_level(self) -> None:
        self.assertEqual(resolve_level("warning"), logging.WARNING)
        self.assertEqual(resolve_level(" Error "), logging.ERROR)
        self.assertEqual(resolve_level("chatty"), logging.INFO)


if __name__ == "__main__":
    unittest.main()
