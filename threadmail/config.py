"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{OUTPUT_DIR / 'threadmail.db'}")
# Seed the demo directory users and sample threads on first start (folders are always seeded)
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Deployment: "development" | "preview" | "production". Sending and moving threads are refused in production.
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development").strip().lower()

# Current user: used when a request carries no X-User-Id header
DEFAULT_USER_ID = int(os.getenv("THREADMAIL_DEFAULT_USER_ID", "1"))
DEFAULT_USER_EMAIL = os.getenv("THREADMAIL_DEFAULT_USER_EMAIL", "me@threadmail.local")

# HTTP server
SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
SERVICE_NAME = os.getenv("SERVICE_NAME", "threadmail")


def is_production(environment: str | None = None) -> bool:
    """Return True when the given (or configured) deployment environment is production."""
    env = (environment if environment is not None else DEPLOYMENT_ENVIRONMENT).strip().lower()
    return env == "production"
