"""Load seed data from CSV files."""

import csv
from pathlib import Path
from typing import Any

from threadmail.config import DATA_DIR


def _read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file and return list of row dicts."""
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def load_users(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load directory users from users.csv."""
    path = csv_path or DATA_DIR / "users.csv"
    return _read_csv(path)


def load_emails(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load sample mailbox emails from emails.csv (one row per email, grouped by thread_key)."""
    path = csv_path or DATA_DIR / "emails.csv"
    return _read_csv(path)


def load_templates(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load starter templates from templates.csv."""
    path = csv_path or DATA_DIR / "templates.csv"
    return _read_csv(path)
