"""Tests for ComposeSession: modes, recipient sources, variables, preview, clipboard and send gating."""

import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from threadmail.compose.session import CLIPBOARD_SEPARATOR, ComposeSession
from threadmail.errors import SendDisabledError, ValidationError
from threadmail.models.compose import ComposeState, ContentMode, CountMode, RecipientSource
from threadmail.models.recipient import Recipient

ANA = Recipient(id=1, first_name="Ana", last_name="Silva", company="Acme", email="ana@example.com")
BO = Recipient(id=2, first_name="Bo", last_name="Chen", company="Initech", email="bo@example.com")
CY = Recipient(id=3, first_name="Cy", company="Globex", email="cy@example.com")

WELCOME = SimpleNamespace(id=7, subject="Hi {firstName}", body="Welcome to {company}!")


class TestModes(unittest.TestCase):
    def test_mode_required(self):
        s = ComposeSession()
        with self.assertRaises(ValidationError):
            s.choose_mode(None)
        with self.assertRaises(ValidationError):
            s.preview()
        self.assertEqual(s.state, ComposeState.CHOOSING_MODE)

    def test_template_overwrites_content_and_keeps_signature(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE, ContentMode.BLANK)
        s.edit_content(subject="draft", body="unsaved", signature="-- Me")
        s.load_template(WELCOME)
        self.assertEqual(s.content.subject, "Hi {firstName}")
        self.assertEqual(s.content.body, "Welcome to {company}!")
        self.assertEqual(s.content.signature, "-- Me")
        self.assertEqual(s.template_id, 7)

    def test_template_mode_requires_template(self):
        s = ComposeSession()
        with self.assertRaises(ValidationError):
            s.choose_mode("single", "template")
        s.choose_mode("bulk", "template", WELCOME)
        self.assertTrue(s.is_bulk)
        self.assertEqual(s.state, ComposeState.CHOOSING_RECIPIENTS)

    def test_reset(self):
        s = ComposeSession()
        s.choose_mode("bulk", "template", WELCOME)
        s.reset()
        self.assertIsNone(s.count_mode)
        self.assertEqual(s.content.subject, "")
        self.assertEqual(s.state, ComposeState.CHOOSING_MODE)


class TestRecipients(unittest.TestCase):
    def test_directory_selection_order_in_bulk(self):
        s = ComposeSession()
        s.choose_mode(CountMode.BULK, ContentMode.TEMPLATE, WELCOME)
        s.use_directory([ANA, BO, CY])
        self.assertEqual(s.active_recipients(), [ANA, BO, CY])
        s.toggle(1)
        self.assertEqual(s.active_recipients(), [ANA, CY])
        s.deselect_all()
        self.assertEqual(s.active_recipients(), [])
        s.toggle(2)
        s.toggle(0)
        self.assertEqual(s.active_recipients(), [ANA, CY])
        s.select_all()
        self.assertEqual(len(s.active_recipients()), 3)

    def test_single_directory_uses_selected_index(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_directory([ANA, BO])
        self.assertEqual(s.active_recipients(), [ANA])
        s.select_recipient(1)
        self.assertEqual(s.active_recipients(), [BO])
        with self.assertRaises(ValidationError):
            s.select_recipient(5)

    def test_manual_bulk_editing(self):
        s = ComposeSession()
        s.choose_mode(CountMode.BULK)
        s.use_manual()
        s.add_manual()
        s.update_manual(0, "first_name", "Dee")
        s.add_manual(BO)
        self.assertEqual([r.first_name for r in s.active_recipients()], ["Dee", "Bo"])
        s.remove_manual(0)
        self.assertEqual(s.active_recipients(), [BO])
        with self.assertRaises(ValidationError):
            s.update_manual(0, "favourite_colour", "blue")

    def test_manual_single(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_manual()
        s.update_manual(None, "email", "dee@example.com")
        (r,) = s.active_recipients()
        self.assertEqual(r.email, "dee@example.com")
        self.assertEqual(r.first_name, "")

    def test_import_replaces_manual_list_in_bulk(self):
        s = ComposeSession()
        s.choose_mode(CountMode.BULK)
        s.use_manual([CY])
        count = s.use_imported([ANA, BO])
        self.assertEqual(count, 2)
        self.assertEqual(s.source, RecipientSource.MANUAL)
        self.assertEqual(s.active_recipients(), [ANA, BO])

    def test_sources_are_directory_or_manual(self):
        self.assertEqual({s.value for s in RecipientSource}, {"db", "manual"})
        s = ComposeSession()
        self.assertEqual(s.source, RecipientSource.DIRECTORY)

    def test_import_in_single_keeps_first_row(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_imported([BO, ANA])
        self.assertEqual(s.active_recipients(), [BO])


class TestVariables(unittest.TestCase):
    def test_add_and_remove_custom_variable(self):
        s = ComposeSession()
        v = s.add_variable("Meeting Date")
        self.assertEqual(v.key, "meetingdate")
        self.assertEqual(v.placeholder, "{{meetingdate}}")
        with self.assertRaises(ValidationError):
            s.add_variable("meeting date")
        s.remove_variable("meetingdate")
        self.assertNotIn("meetingdate", [x.key for x in s.variables])

    def test_punctuated_label_variable_is_substituted(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_manual([ANA])
        v = s.add_variable("Meeting-Date")
        self.assertEqual(v.key, "meeting-date")
        s.set_variable_value(v.key, "Friday")
        s.insert_variable(v.key)
        (email,) = s.preview()
        self.assertEqual(email.body, "Friday")

    def test_braces_in_label_rejected(self):
        with self.assertRaises(ValidationError):
            ComposeSession().add_variable("Deal {size}")

    def test_default_variables_cannot_be_removed(self):
        s = ComposeSession()
        with self.assertRaises(ValidationError):
            s.remove_variable("firstName")

    def test_empty_label_rejected(self):
        with self.assertRaises(ValidationError):
            ComposeSession().add_variable("   ")

    def test_insert_variable(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.edit_content(subject="Hello ")
        s.insert_variable("firstName", "subject")
        self.assertEqual(s.content.subject, "Hello {{firstName}}")

    def test_custom_value_in_preview(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_manual([ANA])
        s.add_variable("Meeting Date")
        s.edit_content(body="See you {{meetingdate}}")
        (email,) = s.preview()
        self.assertEqual(email.body, "See you [Meeting Date]")
        s.set_variable_value("meetingdate", "Monday")
        (email,) = s.preview()
        self.assertEqual(email.body, "See you Monday")


class TestPreviewAndOutput(unittest.TestCase):
    def _bulk(self):
        s = ComposeSession()
        s.choose_mode(CountMode.BULK, ContentMode.TEMPLATE, WELCOME)
        s.use_directory([ANA, BO])
        return s

    def test_bulk_preview_one_per_recipient_in_order(self):
        s = self._bulk()
        emails = s.preview()
        self.assertEqual([e.subject for e in emails], ["Hi Ana", "Hi Bo"])
        self.assertEqual(emails[1].body, "Welcome to Initech!")
        self.assertEqual(s.state, ComposeState.PREVIEWING)

    def test_preview_uses_labels_for_missing_fields(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_directory([])
        s.edit_content(subject="Hi {firstName}")
        (email,) = s.preview()
        self.assertEqual(email.subject, "Hi [First Name]")

    def test_rich_preview(self):
        s = self._bulk()
        emails = s.preview(rich=True)
        self.assertEqual(emails[0].subject, 'Hi <strong class="font-bold">Ana</strong>')

    def test_clipboard_text(self):
        s = self._bulk()
        s.edit_content(signature="-- Me")
        text = s.clipboard_text()
        blocks = text.split(CLIPBOARD_SEPARATOR)
        self.assertEqual(len(blocks), 2)
        self.assertEqual(blocks[0], "Subject: Hi Ana\n\nWelcome to Acme!\n\n-- Me")
        self.assertEqual(s.state, ComposeState.COPYING)

    def test_send_only_single_and_not_production(self):
        s = self._bulk()
        self.assertFalse(s.can_send("development"))
        with self.assertRaises(SendDisabledError):
            s.send_payload("development")

        single = ComposeSession()
        single.choose_mode(CountMode.SINGLE, ContentMode.TEMPLATE, WELCOME)
        single.use_directory([ANA])
        self.assertTrue(single.can_send("development"))
        self.assertFalse(single.can_send("production"))
        with self.assertRaises(SendDisabledError):
            single.send_payload("production")

    def test_send_payload_appends_signature(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE, ContentMode.TEMPLATE, WELCOME)
        s.use_directory([ANA])
        s.edit_content(signature="-- Me")
        subject, body, to = s.send_payload("development")
        self.assertEqual(subject, "Hi Ana")
        self.assertEqual(body, "Welcome to Acme!\n\n-- Me")
        self.assertEqual(to, "ana@example.com")
        self.assertEqual(s.state, ComposeState.SENDING)

    def test_send_payload_requires_email(self):
        s = ComposeSession()
        s.choose_mode(CountMode.SINGLE)
        s.use_manual()
        s.edit_content(subject="x", body="y")
        with self.assertRaises(ValidationError):
            s.send_payload("development")


if __name__ == "__main__":
    unittest.main()
