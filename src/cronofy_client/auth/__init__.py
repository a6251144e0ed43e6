"""Cronofy OAuth token management."""

from cronofy_client.auth.oauth import Credentials, CronofyAuth

__all__ = [
    "CronofyAuth",
    "Credentials",
]
