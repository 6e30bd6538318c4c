"""CLI commands: serve, init-db, templates, render."""

from typer import Typer

from threadmail.cli import db_commands, render_mode, serve
from threadmail.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Threadmail: web mail client with templates and personalised compose")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve.serve)
    app.command(name="init-db")(db_commands.init_database)
    app.command(name="templates")(db_commands.list_templates)
    app.command()(render_mode.render)


register_commands()
