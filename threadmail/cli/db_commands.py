"""Database and template commands: init-db, templates."""

import typer
from rich.table import Table

from threadmail.config import DATABASE_URL, DEFAULT_USER_ID
from threadmail.db import init_db
from threadmail.db.repositories import template_repo, thread_repo
from threadmail.errors import StoreError

from .shared import console, logger


def init_database() -> None:
    """Create tables, default folders and the current user; seed demo data on a fresh database."""
    log = logger.bind(command="init-db")
    try:
        init_db()
        folders = thread_repo.list_folders()
    except StoreError as e:
        console.print(f"[red]{e.message}[/red]")
        log.error("init_db.fail", error=str(e.__cause__ or e))
        raise typer.Exit(1) from e

    table = Table(title=f"Folders ({DATABASE_URL})")
    table.add_column("Folder", style="cyan")
    table.add_column("Threads", justify="right")
    for f in folders:
        table.add_row(f.name, str(f.thread_count))
    console.print(table)
    log.info("init_db.ok", folders=len(folders))


def list_templates(
    user_id: int = typer.Option(DEFAULT_USER_ID, "--user", "-u", help="Owner of the templates"),
) -> None:
    """List a user's saved templates ordered by name."""
    rows = template_repo.list_templates(user_id)
    if not rows:
        console.print(f"[dim]No templates for user {user_id}.[/dim]")
        return
    table = Table(title=f"Templates for user {user_id}")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Subject", style="green")
    table.add_column("Updated")
    for r in rows:
        table.add_row(str(r.id), r.name, r.subject, r.updated_at.strftime("%Y-%m-%d %H:%M"))
    console.print(table)
