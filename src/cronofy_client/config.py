"""Centralized client configuration.

Settings are read from the environment, with an optional .env file in the
configuration directory:
    ~/.cronofy/.env        - CRONOFY_CLIENT_ID, CRONOFY_CLIENT_SECRET, etc.
    ~/.cronofy/token.json  - OAuth tokens written by the CLI

Set CRONOFY_CONFIG_DIR to use a different directory.

This module auto-loads the .env file on import. Variables already present in
the environment always take precedence.
"""

import os
from pathlib import Path

DEFAULT_API_URL = "https://api.cronofy.com"
DEFAULT_APP_URL = "https://app.cronofy.com"

CONFIG_DIR = Path(os.environ.get("CRONOFY_CONFIG_DIR", Path.home() / ".cronofy"))

ENV_FILE = CONFIG_DIR / ".env"
TOKEN_FILE = CONFIG_DIR / "token.json"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            # Remove surrounding quotes
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def api_url() -> str:
    """Base URL for API requests (CRONOFY_API_URL overrides)."""
    return os.environ.get("CRONOFY_API_URL", DEFAULT_API_URL).rstrip("/")


def app_url() -> str:
    """Base URL for the OAuth authorization pages (CRONOFY_APP_URL overrides)."""
    return os.environ.get("CRONOFY_APP_URL", DEFAULT_APP_URL).rstrip("/")


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to configuration directory.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR


def get_credential_status() -> dict:
    """Get status of all configured credentials.

    Returns:
        Dictionary with credential status.
    """
    return {
        "config_dir": str(CONFIG_DIR),
        "env_file": ENV_FILE.exists(),
        "api_url": api_url(),
        "client_id": bool(os.environ.get("CRONOFY_CLIENT_ID")),
        "client_secret": bool(os.environ.get("CRONOFY_CLIENT_SECRET")),
        "token": TOKEN_FILE.exists(),
    }


# Auto-load .env from the config directory on import
_loaded = _load_env_file(ENV_FILE)
