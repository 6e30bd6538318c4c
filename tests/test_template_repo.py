"""Tests for template_repo against an in-memory SQLite store."""

import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy.exc import OperationalError

from threadmail.db import init_db
from threadmail.db.repositories import template_repo
from threadmail.errors import NotFoundError, StoreError, ValidationError

OWNER = 501
OTHER = 502


class TestTemplateRepo(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_create_then_get_returns_same_fields(self):
        created = template_repo.create(OWNER, "Welcome", "Hi {firstName}", "Welcome to {company}!")
        got = template_repo.get_by_id(created.id, OWNER)
        self.assertEqual(got.name, "Welcome")
        self.assertEqual(got.subject, "Hi {firstName}")
        self.assertEqual(got.body, "Welcome to {company}!")
        self.assertEqual(got.user_id, OWNER)
        self.assertIsNotNone(got.created_at)

    def test_create_defaults_subject_and_body(self):
        created = template_repo.create(OWNER, "Empty", None, None)
        got = template_repo.get_by_id(created.id, OWNER)
        self.assertEqual(got.subject, "")
        self.assertEqual(got.body, "")

    def test_blank_name_rejected(self):
        for name in ("", "   ", None):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    template_repo.create(OWNER, name, "s", "b")

    def test_update_replaces_fields(self):
        created = template_repo.create(OWNER, "Draft", "old", "old body")
        updated = template_repo.update(created.id, OWNER, "Final", "new", "new body")
        self.assertEqual((updated.name, updated.subject, updated.body), ("Final", "new", "new body"))
        got = template_repo.get_by_id(created.id, OWNER)
        self.assertEqual(got.name, "Final")
        self.assertGreaterEqual(got.updated_at, got.created_at)

    def test_update_missing_raises(self):
        with self.assertRaises(NotFoundError):
            template_repo.update(999999, OWNER, "x", "", "")

    def test_delete_is_idempotent(self):
        created = template_repo.create(OWNER, "Temporary", "", "")
        template_repo.delete(created.id, OWNER)
        template_repo.delete(created.id, OWNER)
        with self.assertRaises(NotFoundError):
            template_repo.get_by_id(created.id, OWNER)

    def test_other_users_template_looks_missing(self):
        created = template_repo.create(OTHER, "Private", "", "")
        with self.assertRaises(NotFoundError):
            template_repo.get_by_id(created.id, OWNER)
        with self.assertRaises(NotFoundError):
            template_repo.update(created.id, OWNER, "Hijack", "", "")
        template_repo.delete(created.id, OWNER)
        self.assertEqual(template_repo.get_by_id(created.id, OTHER).name, "Private")

    def test_save_creates_or_updates(self):
        row = template_repo.save(OWNER, "Saved", "a", "b")
        again = template_repo.save(OWNER, "Saved v2", "a", "b", template_id=row.id)
        self.assertEqual(again.id, row.id)
        self.assertEqual(again.name, "Saved v2")


class TestStoreFailures(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def _failing_session(self):
        return patch(
            "threadmail.db.repositories.template_repo.get_session",
            side_effect=OperationalError("SELECT 1", {}, Exception("database is locked")),
        )

    def test_list_failure_becomes_store_error(self):
        with self._failing_session():
            with self.assertRaises(StoreError) as ctx:
                template_repo.list_templates(OWNER)
        self.assertEqual(ctx.exception.message, "Failed to load templates.")
        self.assertIsInstance(ctx.exception.__cause__, OperationalError)

    def test_create_failure_becomes_store_error(self):
        with self._failing_session():
            with self.assertRaises(StoreError):
                template_repo.create(OWNER, "Unsaved", "", "")


class TestListTemplates(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_ordered_by_name(self):
        user_id = 503
        for name in ("Charlie", "alpha", "Bravo"):
            template_repo.create(user_id, name, "", "")
        names = [t.name for t in template_repo.list_templates(user_id)]
        self.assertEqual(names, sorted(names))
        self.assertEqual(len(names), 3)

    def test_no_templates(self):
        self.assertEqual(template_repo.list_templates(504), [])


if __name__ == "__main__":
    unittest.main()
