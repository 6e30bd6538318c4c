"""Placeholder engine: substitute recipient fields and custom variables into subjects and bodies.

Token grammar:

    {firstName} {lastName} {company} {companyName} {jobTitle} {position}
    {{key}}   any of the names above, or a caller-registered custom key (any text without braces)

``{companyName}`` reads the same value as ``{company}`` and ``{position}`` the same
value as ``{jobTitle}``. Matching is case-sensitive and every occurrence is replaced.

Substitution is a single left-to-right pass, so the replacement order never
matters and a substituted value is not scanned again within the same call.
Rendering the *output* a second time is a different story: if a recipient value
itself contains a token (say a company literally named ``{firstName}``), the
second pass substitutes it. Callers must not rely on ``render`` being idempotent.

Recipient values are inserted verbatim. ``render_rich`` does not escape them
before wrapping them in markup.
"""

import enum
import re
from collections.abc import Mapping
from typing import Any, Optional

from threadmail.models.recipient import Recipient


class MissingValue(str, enum.Enum):
    """What to substitute when a field has no value."""

    EMPTY = "empty"  # ""
    LABEL = "label"  # "[First Name]"


# token -> field names to read, in order
FIELD_TOKENS: dict[str, tuple[str, ...]] = {
    "firstName": ("firstName",),
    "lastName": ("lastName",),
    "company": ("company", "companyName"),
    "companyName": ("company", "companyName"),
    "jobTitle": ("jobTitle", "position"),
    "position": ("jobTitle", "position"),
}

FIELD_LABELS: dict[str, str] = {
    "firstName": "First Name",
    "lastName": "Last Name",
    "company": "Company",
    "companyName": "Company",
    "jobTitle": "Job Title",
    "position": "Position",
}

# Variables offered by the editor out of the box; they cannot be removed.
DEFAULT_VARIABLES: tuple[tuple[str, str], ...] = (
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    ("companyName", "Company Name"),
)

_SINGLE = "|".join(re.escape(name) for name in FIELD_TOKENS)
# Custom keys come from operator labels, so anything but braces is allowed inside {{...}}
_TOKEN_RE = re.compile(r"\{\{([^{}]+)\}\}|\{(" + _SINGLE + r")\}")


def placeholder_for(key: str, double: bool = True) -> str:
    """Return the token text for a key: ``{{key}}`` or ``{key}``."""
    return "{{" + key + "}}" if double else "{" + key + "}"


def custom_variable_key(label: str) -> str:
    """Derive a custom variable key from an operator-entered label ("Meeting Date" -> "meetingdate")."""
    return re.sub(r"\s+", "", label or "").lower()


def _field_values(data: Any) -> dict[str, Optional[str]]:
    if data is None:
        return {}
    if isinstance(data, Recipient):
        return data.model_dump(by_alias=True)
    if isinstance(data, Mapping):
        return dict(data)
    raise TypeError(f"Unsupported recipient data: {type(data).__name__}")


def _lookup(values: Mapping[str, Any], names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = values.get(name)
        if value is not None:
            return str(value)
    return None


def _missing(key: str, missing: MissingValue, labels: Mapping[str, str]) -> str:
    if missing is MissingValue.EMPTY:
        return ""
    return f"[{labels.get(key) or FIELD_LABELS.get(key) or key}]"


def _substitute(
    text: str,
    data: Any,
    substitutions: Optional[Mapping[str, Optional[str]]],
    missing: MissingValue,
    labels: Optional[Mapping[str, str]],
    wrap,
) -> str:
    if not text or "{" not in text:
        return text or ""
    values = _field_values(data)
    custom = dict(substitutions or {})
    labels = labels or {}

    def _resolve(key: str) -> Optional[str]:
        names = FIELD_TOKENS.get(key)
        value = _lookup(values, names) if names else None
        if value is None:
            return _missing(key, missing, labels)
        return wrap(value)

    def _sub(match: re.Match) -> str:
        double_key, single_key = match.group(1), match.group(2)
        if single_key is not None:
            return _resolve(single_key)
        if double_key in custom:
            value = custom[double_key]
            return _missing(double_key, missing, labels) if value is None else wrap(str(value))
        if double_key in FIELD_TOKENS:
            return _resolve(double_key)
        # Unregistered double-brace key: leave the token for the author to notice
        return match.group(0)

    return _TOKEN_RE.sub(_sub, text)


def render(
    text: str,
    data: Any = None,
    substitutions: Optional[Mapping[str, Optional[str]]] = None,
    missing: MissingValue = MissingValue.EMPTY,
    labels: Optional[Mapping[str, str]] = None,
) -> str:
    """Return ``text`` with recognized tokens replaced by values from ``data`` and ``substitutions``.

    ``data`` is a :class:`Recipient` or a mapping keyed by token name (``{"firstName": "Ana"}``).
    ``substitutions`` maps custom keys (double-brace form only) to values; a ``None`` value counts
    as missing. ``missing`` picks the policy for absent values, ``labels`` overrides the bracketed
    label for custom keys.
    """
    return _substitute(text, data, substitutions, missing, labels, wrap=lambda v: v)


def render_rich(
    text: str,
    data: Any = None,
    substitutions: Optional[Mapping[str, Optional[str]]] = None,
    missing: MissingValue = MissingValue.LABEL,
    labels: Optional[Mapping[str, str]] = None,
) -> str:
    """HTML preview variant: substituted values wrapped in ``<strong>``, newlines as ``<br />``. Values are not escaped."""
    out = _substitute(
        text, data, substitutions, missing, labels, wrap=lambda v: f'<strong class="font-bold">{v}</strong>'
    )
    return out.replace("\n", "<br />")


def find_tokens(text: str) -> list[str]:
    """Return the distinct keys referenced by ``text`` in order of first appearance."""
    seen: list[str] = []
    for match in _TOKEN_RE.finditer(text or ""):
        key = match.group(1) or match.group(2)
        if key not in seen:
            seen.append(key)
    return seen
