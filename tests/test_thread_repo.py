"""Tests for thread_repo: single send, folder moves, listing and thread detail."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select

from threadmail.config import DEFAULT_USER_EMAIL, DEFAULT_USER_ID
from threadmail.db import get_session, init_db
from threadmail.db.models import Email, Folder, Thread, User
from threadmail.db.repositories import thread_repo, user_repo
from threadmail.errors import NotConfiguredError, NotFoundError, ValidationError


def _count(model) -> int:
    with get_session() as session:
        return session.scalar(select(func.count()).select_from(model))


def _rename_folder(old: str, new: str) -> None:
    with get_session() as session:
        folder = session.scalars(select(Folder).where(Folder.name == old)).one()
        folder.name = new


class TestSendSingle(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_creates_recipient_thread_email_and_sent_membership(self):
        users, threads, emails = _count(User), _count(Thread), _count(Email)
        thread = thread_repo.send_single("Quarterly update", "Numbers attached.", "New.Person@Example.com", DEFAULT_USER_ID)

        self.assertEqual(_count(User), users + 1)
        self.assertEqual(_count(Thread), threads + 1)
        self.assertEqual(_count(Email), emails + 1)
        self.assertEqual(thread_repo.thread_folder_names(thread.id), ["Sent"])
        self.assertEqual(len(user_repo.find_by_email("new.person@example.com")), 1)

        detail = thread_repo.get_thread(thread.id)
        self.assertEqual(detail.subject, "Quarterly update")
        self.assertEqual(detail.folder, "Sent")
        (email,) = detail.emails
        self.assertEqual(email.body, "Numbers attached.")
        self.assertEqual(email.sender.email, DEFAULT_USER_EMAIL)
        self.assertEqual(email.recipient.email, "new.person@example.com")

    def test_existing_recipient_is_reused(self):
        thread_repo.send_single("First", "one", "repeat@example.com", DEFAULT_USER_ID)
        users = _count(User)
        thread_repo.send_single("Second", "two", "repeat@example.com", DEFAULT_USER_ID)
        self.assertEqual(_count(User), users)
        self.assertEqual(len(user_repo.find_by_email("repeat@example.com")), 1)

    def test_validation_order(self):
        cases = [
            (("", "body", "a@example.com"), "Subject is required"),
            (("   ", "body", "a@example.com"), "Subject is required"),
            (("subject", "", "a@example.com"), "Body is required"),
            (("subject", "body", ""), "Invalid email address"),
            (("subject", "body", "not-an-address"), "Invalid email address"),
        ]
        threads = _count(Thread)
        for args, message in cases:
            with self.subTest(args=args):
                with self.assertRaises(ValidationError) as ctx:
                    thread_repo.send_single(*args, sender_id=DEFAULT_USER_ID)
                self.assertEqual(ctx.exception.message, message)
        self.assertEqual(_count(Thread), threads)

    def test_missing_sent_folder_writes_nothing(self):
        _rename_folder("Sent", "Sent-renamed")
        try:
            users, threads = _count(User), _count(Thread)
            with self.assertRaises(NotConfiguredError):
                thread_repo.send_single("Hello", "Body", "nobody-yet@example.com", DEFAULT_USER_ID)
            self.assertEqual(_count(User), users)
            self.assertEqual(_count(Thread), threads)
        finally:
            _rename_folder("Sent-renamed", "Sent")


class TestMoveThread(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_archive_then_trash_leaves_single_membership(self):
        thread = thread_repo.send_single("Move me", "body", "mover@example.com", DEFAULT_USER_ID)
        thread_repo.move_to_archive(thread.id)
        self.assertEqual(thread_repo.thread_folder_names(thread.id), ["Archive"])
        thread_repo.move_to_trash(thread.id)
        self.assertEqual(thread_repo.thread_folder_names(thread.id), ["Trash"])

    def test_move_to_same_folder_is_stable(self):
        thread = thread_repo.send_single("Twice", "body", "twice@example.com", DEFAULT_USER_ID)
        thread_repo.move_thread(thread.id, "Archive")
        thread_repo.move_thread(thread.id, "Archive")
        self.assertEqual(thread_repo.thread_folder_names(thread.id), ["Archive"])

    def test_unknown_folder(self):
        thread = thread_repo.send_single("Stay", "body", "stay@example.com", DEFAULT_USER_ID)
        with self.assertRaises(NotFoundError) as ctx:
            thread_repo.move_thread(thread.id, "Spam")
        self.assertEqual(ctx.exception.message, "Spam folder not found")
        self.assertEqual(thread_repo.thread_folder_names(thread.id), ["Sent"])

    def test_unknown_thread(self):
        with self.assertRaises(NotFoundError):
            thread_repo.move_thread(987654, "Trash")


class TestListing(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_folders_include_defaults(self):
        names = [f.name for f in thread_repo.list_folders()]
        for name in ("Inbox", "Sent", "Archive", "Trash"):
            self.assertIn(name, names)

    def test_folder_counts_track_moves(self):
        thread = thread_repo.send_single("Counted", "body", "counted@example.com", DEFAULT_USER_ID)
        before = thread_repo.folder_counts()
        thread_repo.move_to_trash(thread.id)
        after = thread_repo.folder_counts()
        self.assertEqual(after["Sent"], before["Sent"] - 1)
        self.assertEqual(after["Trash"], before["Trash"] + 1)

    def test_sent_listing_newest_first_and_search(self):
        older = thread_repo.send_single("Listing zebra older", "b", "lister@example.com", DEFAULT_USER_ID)
        newer = thread_repo.send_single("Listing zebra newer", "b", "lister@example.com", DEFAULT_USER_ID)
        found = thread_repo.list_threads("sent", search="ZEBRA")
        self.assertEqual([t.id for t in found], [newer.id, older.id])
        self.assertEqual(found[0].email_count, 1)
        self.assertEqual(found[0].latest_email.recipient.email, "lister@example.com")

    def test_unknown_folder_listing(self):
        with self.assertRaises(NotFoundError):
            thread_repo.list_threads("Nowhere")

    def test_missing_thread_detail(self):
        with self.assertRaises(NotFoundError):
            thread_repo.get_thread(123456)


if __name__ == "__main__":
    unittest.main()
