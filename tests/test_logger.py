"""Tests for the structlog setup."""

import logging
import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import structlog
from structlog.contextvars import get_contextvars

from threadmail.utils.logger import NOISY_LOGGERS, bind_context, clear_context, get_logger


class TestLogger(unittest.TestCase):
    def test_noisy_library_loggers_quieted(self):
        get_logger("threadmail.tests")
        for name in NOISY_LOGGERS:
            with self.subTest(name=name):
                self.assertGreaterEqual(logging.getLogger(name).level, logging.WARNING)

    def test_bindings_carried(self):
        logger = get_logger("threadmail.tests", thread_id=7)
        self.assertEqual(structlog.get_context(logger), {"thread_id": 7})

    def test_request_context_bind_and_clear(self):
        bind_context(method="GET", path="/api/folders")
        try:
            self.assertEqual(get_contextvars()["path"], "/api/folders")
        finally:
            clear_context()
        self.assertEqual(get_contextvars(), {})


if __name__ == "__main__":
    unittest.main()
