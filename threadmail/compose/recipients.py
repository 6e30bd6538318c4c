"""Recipient import: CSV / XLSX parsing and header-alias normalization."""

import csv
import io
from typing import Any, Iterable

from openpyxl import load_workbook

from threadmail.errors import ValidationError
from threadmail.models.recipient import Recipient
from threadmail.utils.logger import get_logger

logger = get_logger("threadmail.compose.recipients")

# Recipient field -> accepted header spellings, tried in order; the first non-empty cell wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "first_name": ("firstName", "FirstName", "first_name", "First Name", "first", "name"),
    "last_name": ("lastName", "LastName", "last_name", "Last Name", "last"),
    "company": ("company", "Company", "companyName", "company_name", "Company Name"),
    "job_title": ("jobTitle", "JobTitle", "job_title", "Job Title", "position", "Position"),
    "email": ("email", "Email", "E-mail", "email_address"),
}

SUPPORTED_FORMATS = ("csv", "xlsx")


def normalize_row(row: dict[str, Any]) -> Recipient:
    """Map one imported row onto a Recipient using FIELD_ALIASES. Unknown headers are ignored, missing fields are ""."""
    values: dict[str, str] = {}
    for field, aliases in FIELD_ALIASES.items():
        value = ""
        for alias in aliases:
            cell = row.get(alias)
            if cell is None:
                continue
            text = str(cell).strip()
            if text:
                value = text
                break
        values[field] = value
    return Recipient(**values)


def normalize_rows(rows: Iterable[dict[str, Any]]) -> list[Recipient]:
    return [normalize_row(r) for r in rows]


def _rows_from_table(table: list[list[Any]]) -> list[dict[str, Any]]:
    """First row is the header; later rows are mapped positionally (short rows padded with "")."""
    if not table:
        return []
    headers = [str(h).strip() if h is not None else "" for h in table[0]]
    rows = []
    for cells in table[1:]:
        row = {}
        for i, header in enumerate(headers):
            if not header:
                continue
            cell = cells[i] if i < len(cells) else None
            row[header] = "" if cell is None else str(cell).strip()
        rows.append(row)
    return rows


def parse_csv_text(text: str) -> list[Recipient]:
    """Parse comma-delimited text (header row first). Quotes are not interpreted; blank lines are skipped."""
    lines = [line for line in (text or "").splitlines() if line.strip()]
    table = [list(cells) for cells in csv.reader(lines, delimiter=",", quoting=csv.QUOTE_NONE)]
    recipients = normalize_rows(_rows_from_table(table))
    logger.debug("recipients.csv_parsed", rows=len(recipients))
    return recipients


def parse_xlsx_bytes(data: bytes) -> list[Recipient]:
    """Parse the first worksheet of an .xlsx workbook (first row = headers)."""
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        raise ValidationError(f"Could not read spreadsheet: {e}") from e
    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        table = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    # Trailing empty rows are common in exported sheets
    table = [row for row in table if any(cell not in (None, "") for cell in row)]
    recipients = normalize_rows(_rows_from_table(table))
    logger.debug("recipients.xlsx_parsed", rows=len(recipients))
    return recipients


def parse_upload(data: bytes, fmt: str) -> list[Recipient]:
    """Dispatch on format ("csv" or "xlsx")."""
    fmt = (fmt or "").strip().lower().lstrip(".")
    if fmt == "csv":
        return parse_csv_text(data.decode("utf-8-sig", errors="replace"))
    if fmt == "xlsx":
        return parse_xlsx_bytes(data)
    raise ValidationError(f"Unsupported import format: {fmt!r}. Use one of {', '.join(SUPPORTED_FORMATS)}.")


def format_from_filename(filename: str) -> str:
    name = (filename or "").lower()
    for fmt in SUPPORTED_FORMATS:
        if name.endswith("." + fmt):
            return fmt
    raise ValidationError("Only CSV and XLSX files are supported")
