"""Render mode: personalise a template or ad hoc subject/body for recipients from a CSV/XLSX file."""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.text import Text

from threadmail.compose.recipients import format_from_filename, parse_upload
from threadmail.compose.session import ComposeSession
from threadmail.config import DEFAULT_USER_ID
from threadmail.db.repositories import template_repo
from threadmail.errors import ThreadmailError
from threadmail.models.compose import ContentMode, CountMode, EmailContent

from .shared import console, logger


def render(
    recipients_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or XLSX with a header row"),
    template_id: Optional[int] = typer.Option(None, "--template", "-t", help="Saved template id"),
    subject: str = typer.Option("", "--subject", "-s", help="Subject when no template is given"),
    body: str = typer.Option("", "--body", "-b", help="Body when no template is given"),
    signature: str = typer.Option("", "--signature", help="Appended below each body"),
    user_id: int = typer.Option(DEFAULT_USER_ID, "--user", "-u", help="Template owner"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the plain-text result here"),
) -> None:
    """Print one personalised email per recipient row."""
    log = logger.bind(command="render", file=str(recipients_file))
    session = ComposeSession(EmailContent(subject=subject, body=body, signature=signature))
    try:
        recipients = parse_upload(recipients_file.read_bytes(), format_from_filename(recipients_file.name))
        if template_id is not None:
            template = template_repo.get_by_id(template_id, user_id)
            session.choose_mode(CountMode.BULK, ContentMode.TEMPLATE, template=template)
        else:
            session.choose_mode(CountMode.BULK, ContentMode.CUSTOM)
        session.use_imported(recipients)
        emails = session.preview()
        text = session.clipboard_text()
    except ThreadmailError as e:
        console.print(f"[red]{e.message}[/red]")
        log.error("render.fail", error=e.message)
        raise typer.Exit(1) from e

    for i, email in enumerate(emails, start=1):
        to = email.recipient.email or "(no email)"
        console.print(Panel(Text(email.to_text()), title=f"{i}. {to}", expand=False))
    if output is not None:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote {len(emails)} emails to {output}[/green]")
    log.info("render.ok", count=len(emails))
