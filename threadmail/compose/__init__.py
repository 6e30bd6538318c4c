"""Compose flow: placeholder engine, recipient import, compose session."""

from threadmail.compose.placeholders import (
    DEFAULT_VARIABLES,
    MissingValue,
    custom_variable_key,
    find_tokens,
    placeholder_for,
    render,
    render_rich,
)
from threadmail.compose.recipients import (
    FIELD_ALIASES,
    normalize_row,
    parse_csv_text,
    parse_upload,
    parse_xlsx_bytes,
)
from threadmail.compose.session import ComposeSession

__all__ = [
    "DEFAULT_VARIABLES",
    "MissingValue",
    "custom_variable_key",
    "find_tokens",
    "placeholder_for",
    "render",
    "render_rich",
    "FIELD_ALIASES",
    "normalize_row",
    "parse_csv_text",
    "parse_upload",
    "parse_xlsx_bytes",
    "ComposeSession",
]
