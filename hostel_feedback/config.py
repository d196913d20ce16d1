"""Environment configuration for the feedback service."""

import os
from os import getenv
from pathlib import Path
from typing import Optional

ENV_FILE_PATHS = [
    Path("/opt/hostel-feedback/.env"),
    Path(__file__).parent.parent / ".env",
    Path.cwd() / ".env",
]

DEFAULT_DATA_FILE = Path("data") / "feedbacks.json"


def load_env_file_fallback(paths: Optional[list] = None) -> int:
    """Load the first readable .env file without overriding the environment.

    Returns the number of variables that were set.
    """
    for env_file in paths or ENV_FILE_PATHS:
        if not (env_file.exists() and env_file.is_file()):
            continue
        loaded_count = 0
        with open(env_file, "r") as f:
            for line in f:
                line = line.strip()
                # Skip empty lines and comments
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if value[:1] in ('"', "'") and value[-1:] == value[:1] and len(value) >= 2:
                    value = value[1:-1]
                if key and value and key not in os.environ:
                    os.environ[key] = value
                    loaded_count += 1
        return loaded_count
    return 0


def is_debug() -> bool:
    return getenv("APP_DEBUG", "false").lower() == "true"


def normalize_database_url(url: str) -> str:
    """Rewrite bare PostgreSQL URLs to the asyncpg driver form."""
    url = url.strip()
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def get_database_url() -> Optional[str]:
    """Connection string for the relational backend, or None for the file backend."""
    url = getenv("DATABASE_URL") or getenv("POSTGRES_URL")
    if not url or not url.strip():
        return None
    return normalize_database_url(url)


def get_data_file() -> Path:
    return Path(getenv("FEEDBACK_DATA_FILE") or DEFAULT_DATA_FILE)
