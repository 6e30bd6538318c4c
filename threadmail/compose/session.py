"""Compose session: the operator's in-progress email, independent of any rendering layer.

State flow:

    CHOOSING_MODE -> CHOOSING_RECIPIENTS -> EDITING_CONTENT -> PREVIEWING -> COPYING | SENDING

The session only holds state and renders; persistence (loading templates, sending)
is done by the caller through the repositories.
"""

from typing import Any, Optional

from threadmail.compose.placeholders import (
    DEFAULT_VARIABLES,
    FIELD_TOKENS,
    MissingValue,
    custom_variable_key,
    placeholder_for,
    render,
    render_rich,
)
from threadmail.config import is_production
from threadmail.errors import SendDisabledError, ValidationError
from threadmail.models.compose import (
    ComposeState,
    ContentMode,
    CountMode,
    EmailContent,
    RecipientSource,
    RenderedEmail,
    Variable,
)
from threadmail.models.recipient import Recipient

CLIPBOARD_SEPARATOR = "\n\n" + "-" * 40 + "\n\n"
_RECIPIENT_FIELDS = ("first_name", "last_name", "company", "job_title", "email")


def _default_variables() -> list[Variable]:
    return [Variable(key=k, label=label, placeholder=placeholder_for(k)) for k, label in DEFAULT_VARIABLES]


class ComposeSession:
    """Mode, recipients, content and custom variables for one compose flow."""

    def __init__(self, content: Optional[EmailContent] = None):
        self.state = ComposeState.CHOOSING_MODE
        self.count_mode: Optional[CountMode] = None
        self.content_mode: Optional[ContentMode] = None
        self.template_id: Optional[int] = None
        self.content = content or EmailContent()
        self.source = RecipientSource.DIRECTORY
        self.directory: list[Recipient] = []
        self.selected: set[int] = set()
        self.selected_index = 0
        self.manual: list[Recipient] = []
        self.manual_single = Recipient.blank()
        self.variables = _default_variables()

    # -------------------------
    # Mode
    # -------------------------

    @property
    def is_bulk(self) -> bool:
        return self.count_mode is CountMode.BULK

    def choose_mode(
        self,
        count_mode: CountMode | str | None,
        content_mode: ContentMode | str = ContentMode.BLANK,
        template: Any = None,
    ) -> None:
        """Pick single/bulk and where the content starts from. A template choice overwrites subject and body."""
        if count_mode is None:
            raise ValidationError("Choose single or bulk before continuing")
        self.count_mode = CountMode(count_mode)
        self.content_mode = ContentMode(content_mode)
        if self.content_mode is ContentMode.TEMPLATE:
            if template is None:
                raise ValidationError("A template must be selected")
            self.load_template(template)
        elif self.content_mode is ContentMode.BLANK:
            self.template_id = None
            self.content = self.content.model_copy(update={"subject": "", "body": ""})
        self.state = ComposeState.CHOOSING_RECIPIENTS

    def reset(self) -> None:
        """Back to the mode choice (dialog closed or "back" pressed)."""
        self.__init__()

    def load_template(self, template: Any) -> None:
        """Overwrite subject and body with the template's. Unsaved edits are discarded; the signature is kept."""
        self.content = self.content.model_copy(
            update={"subject": template.subject or "", "body": template.body or ""}
        )
        self.template_id = getattr(template, "id", None)

    def _require_mode(self) -> None:
        if self.count_mode is None:
            raise ValidationError("Choose single or bulk before continuing")

    # -------------------------
    # Recipients
    # -------------------------

    def use_directory(self, recipients: list[Recipient]) -> None:
        """Use directory recipients; all of them start selected."""
        self._require_mode()
        self.source = RecipientSource.DIRECTORY
        self.directory = list(recipients)
        self.selected = set(range(len(self.directory)))
        self.selected_index = 0

    def use_manual(self, recipients: Optional[list[Recipient]] = None) -> None:
        self._require_mode()
        self.source = RecipientSource.MANUAL
        if self.is_bulk:
            self.manual = list(recipients or [])
        elif recipients:
            self.manual_single = recipients[0]

    def use_imported(self, recipients: list[Recipient]) -> int:
        """Load imported rows. Bulk mode switches to manual recipients; single mode keeps only the first row."""
        self._require_mode()
        self.source = RecipientSource.MANUAL
        if self.is_bulk:
            self.manual = list(recipients)
        elif recipients:
            self.manual_single = recipients[0]
        return len(recipients)

    def toggle(self, index: int) -> None:
        self._check_directory_index(index)
        if index in self.selected:
            self.selected.discard(index)
        else:
            self.selected.add(index)

    def select_all(self) -> None:
        self.selected = set(range(len(self.directory)))

    def deselect_all(self) -> None:
        self.selected = set()

    def select_recipient(self, index: int) -> None:
        """Single mode: pick which directory recipient the preview uses."""
        self._check_directory_index(index)
        self.selected_index = index

    def _check_directory_index(self, index: int) -> None:
        if not 0 <= index < len(self.directory):
            raise ValidationError(f"No recipient at position {index}")

    def add_manual(self, recipient: Optional[Recipient] = None) -> None:
        self.manual.append(recipient or Recipient.blank())

    def remove_manual(self, index: int) -> None:
        if not 0 <= index < len(self.manual):
            raise ValidationError(f"No recipient at position {index}")
        del self.manual[index]

    def update_manual(self, index: Optional[int], field: str, value: str) -> None:
        """Change one field of a manual recipient. ``index=None`` edits the single-mode recipient."""
        if field not in _RECIPIENT_FIELDS:
            raise ValidationError(f"Unknown recipient field: {field!r}")
        if index is None:
            self.manual_single = self.manual_single.replace(**{field: value})
            return
        if not 0 <= index < len(self.manual):
            raise ValidationError(f"No recipient at position {index}")
        self.manual[index] = self.manual[index].replace(**{field: value})

    def active_recipients(self) -> list[Recipient]:
        """Recipients the preview is built for, in active-list order."""
        if self.source is RecipientSource.DIRECTORY:
            if not self.is_bulk:
                if not self.directory:
                    return [Recipient()]
                return [self.directory[self.selected_index]]
            return [r for i, r in enumerate(self.directory) if i in self.selected]
        if not self.is_bulk:
            return [self.manual_single]
        return list(self.manual)

    # -------------------------
    # Content and variables
    # -------------------------

    def edit_content(
        self,
        subject: Optional[str] = None,
        body: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> None:
        self._require_mode()
        updates = {k: v for k, v in (("subject", subject), ("body", body), ("signature", signature)) if v is not None}
        self.content = self.content.model_copy(update=updates)
        self.state = ComposeState.EDITING_CONTENT

    def insert_variable(self, key: str, target: str = "body") -> None:
        """Append a variable's placeholder to the subject or the body."""
        variable = self._variable(key)
        if target not in ("subject", "body"):
            raise ValidationError(f"Unknown target: {target!r}")
        current = getattr(self.content, target)
        self.edit_content(**{target: current + variable.placeholder})

    def add_variable(self, label: str, key: Optional[str] = None) -> Variable:
        """Register a custom variable. The key is derived from the label unless given."""
        key = key.strip() if key is not None else custom_variable_key(label)
        if not key:
            raise ValidationError("Variable name is required")
        if "{" in key or "}" in key:
            raise ValidationError("Variable name cannot contain braces")
        if any(v.key == key for v in self.variables):
            raise ValidationError(f"{placeholder_for(key)} already exists")
        variable = Variable(key=key, label=label.strip(), placeholder=placeholder_for(key))
        self.variables.append(variable)
        return variable

    def remove_variable(self, key: str) -> None:
        if any(k == key for k, _ in DEFAULT_VARIABLES):
            raise ValidationError("Default variables cannot be removed")
        self._variable(key)
        self.variables = [v for v in self.variables if v.key != key]

    def set_variable_value(self, key: str, value: Optional[str]) -> None:
        variable = self._variable(key)
        self.variables = [v if v is not variable else v.model_copy(update={"value": value}) for v in self.variables]

    def _variable(self, key: str) -> Variable:
        for v in self.variables:
            if v.key == key:
                return v
        raise ValidationError(f"Unknown variable: {key!r}")

    def substitutions(self) -> dict[str, Optional[str]]:
        """Custom variable values for the double-brace form. Field variables come from the recipient."""
        return {v.key: v.value for v in self.variables if v.key not in FIELD_TOKENS}

    def _labels(self) -> dict[str, str]:
        return {v.key: v.label for v in self.variables if v.key not in FIELD_TOKENS}

    # -------------------------
    # Output
    # -------------------------

    def preview(self, rich: bool = False) -> list[RenderedEmail]:
        """One rendered email per active recipient. Missing fields show as bracketed labels."""
        self._require_mode()
        fn = render_rich if rich else render
        subs, labels = self.substitutions(), self._labels()
        out = []
        for recipient in self.active_recipients():
            out.append(
                RenderedEmail(
                    recipient=recipient,
                    subject=fn(self.content.subject, recipient, subs, MissingValue.LABEL, labels),
                    body=fn(self.content.body, recipient, subs, MissingValue.LABEL, labels),
                    signature=fn(self.content.signature, recipient, subs, MissingValue.LABEL, labels),
                )
            )
        self.state = ComposeState.PREVIEWING
        return out

    def clipboard_text(self) -> str:
        text = CLIPBOARD_SEPARATOR.join(email.to_text() for email in self.preview())
        self.state = ComposeState.COPYING
        return text

    def can_send(self, environment: Optional[str] = None) -> bool:
        """Sending is only offered for a single recipient outside production."""
        return self.count_mode is CountMode.SINGLE and not is_production(environment)

    def send_payload(self, environment: Optional[str] = None) -> tuple[str, str, str]:
        """Return (subject, body, recipient_email) for the single rendered email."""
        if not self.can_send(environment):
            raise SendDisabledError()
        (email,) = self.preview()
        recipient_email = (email.recipient.email or "").strip()
        if not recipient_email:
            raise ValidationError("Recipient email is required")
        body = email.body + ("\n\n" + email.signature if email.signature else "")
        self.state = ComposeState.SENDING
        return email.subject, body, recipient_email
