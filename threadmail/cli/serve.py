"""Serve mode: run the FastAPI app with uvicorn."""

import sys

import typer
import uvicorn

from threadmail.config import DEPLOYMENT_ENVIRONMENT, SERVER_HOST, SERVER_PORT
from threadmail.db import init_db
from threadmail.web.server import create_app

from .shared import console, logger


def serve(
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Port for the HTTP server"),
    host: str = typer.Option(SERVER_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the mail client API server."""
    init_db()
    log = logger.bind(command="serve", port=port)
    log.info("serve.start", environment=DEPLOYMENT_ENVIRONMENT)

    app = create_app()
    console.print(f"[green]Starting threadmail on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /api/folders, /api/templates, /api/compose/preview, /health[/dim]")
    if DEPLOYMENT_ENVIRONMENT == "production":
        console.print("[yellow]Production mode: sending and moving threads are disabled.[/yellow]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info", timeout_graceful_shutdown=15)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
