"""Cronofy OAuth management using Authlib.

This module holds the access and refresh tokens for one account and
provides:
- Authorization URL generation for the OAuth 2.0 code flow
- Code exchange, token refresh and revocation
- Optional token storage in a JSON file

Refreshing is never automatic: callers that receive an
AuthenticationFailureError call refresh() and retry the request themselves.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from cronofy_client.config import api_url, app_url
from cronofy_client.exceptions import CredentialsMissingError, UnknownError, map_error

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """OAuth credentials issued for an account."""

    access_token: str
    refresh_token: str | None = None
    expires_at: float | None = None
    expires_in: int | None = None
    scope: str | None = None

    @classmethod
    def from_token(cls, token: dict[str, Any]) -> Credentials:
        return cls(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token"),
            expires_at=token.get("expires_at"),
            expires_in=token.get("expires_in"),
            scope=token.get("scope"),
        )


def _raise_for_status(response: requests.Response) -> requests.Response:
    """Map a failed token endpoint response onto the client's exceptions."""
    if not response.ok:
        raise map_error(response.status_code, response.text)
    return response


class CronofyAuth:
    """Cronofy OAuth management using Authlib.

    Example:
        >>> auth = CronofyAuth(client_id="...", client_secret="...")
        >>> url = auth.user_auth_link("https://example.com/callback", ["read_events"])
        >>> # ... user authorizes, Cronofy redirects back with ?code=...
        >>> credentials = auth.get_token_from_code(code, "https://example.com/callback")
        >>> auth.current_access_token()
        '...'
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        token_path: str | Path | None = None,
    ):
        """Initialize Cronofy OAuth.

        Args:
            client_id: OAuth client ID. If None, reads from CRONOFY_CLIENT_ID.
            client_secret: OAuth client secret. If None, reads from CRONOFY_CLIENT_SECRET.
            access_token: Existing access token for the account.
            refresh_token: Existing refresh token for the account.
            token_path: JSON file to load tokens from and save issued tokens to.
                Explicit access/refresh tokens take precedence over the file.
        """
        self.client_id = client_id or os.environ.get("CRONOFY_CLIENT_ID")
        self.client_secret = client_secret or os.environ.get("CRONOFY_CLIENT_SECRET")
        self.token_path = Path(token_path) if token_path else None

        self.token: dict[str, Any] | None = None
        if access_token or refresh_token:
            self.token = {"access_token": access_token, "refresh_token": refresh_token}
        elif self.token_path:
            self.token = self._load_token()

        self.last_refresh: datetime | None = None

    @property
    def authorize_url(self) -> str:
        return f"{app_url()}/oauth/authorize"

    @property
    def token_url(self) -> str:
        return f"{api_url()}/oauth/token"

    @property
    def revoke_url(self) -> str:
        return f"{api_url()}/oauth/token/revoke"

    @property
    def access_token(self) -> str | None:
        return self.token.get("access_token") if self.token else None

    @property
    def refresh_token(self) -> str | None:
        return self.token.get("refresh_token") if self.token else None

    def current_access_token(self) -> str:
        """Return the access token to authenticate a request with.

        Raises:
            CredentialsMissingError: If there is no access token.
        """
        if not self.access_token:
            raise CredentialsMissingError()
        return self.access_token

    def _session(self, redirect_uri: str | None = None) -> OAuth2Session:
        session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=redirect_uri,
            token=self.token,
            token_endpoint_auth_method="client_secret_post",
        )
        session.register_compliance_hook("access_token_response", _raise_for_status)
        session.register_compliance_hook("refresh_token_response", _raise_for_status)
        return session

    def user_auth_link(
        self,
        redirect_uri: str,
        scope: list[str],
        state: str | None = None,
    ) -> str:
        """Build the URL to send the user to for authorization.

        Args:
            redirect_uri: Where Cronofy returns the user with the code.
            scope: Scopes to request.
            state: Value to carry through the authorization process.

        Returns:
            Authorization URL.
        """
        return prepare_grant_uri(
            self.authorize_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=redirect_uri,
            scope=" ".join(scope),
            state=state,
        )

    def get_token_from_code(self, code: str, redirect_uri: str) -> Credentials:
        """Exchange an authorization code for credentials.

        Raises:
            BadRequestError: If the code is unknown, revoked or does not match
                the redirect URI.
            AuthenticationFailureError: If the client ID and secret are not valid.
        """
        session = self._session(redirect_uri)
        token = self._call(lambda: session.fetch_token(self.token_url, code=code))
        self._save_token(dict(token))
        logger.info("Issued access token from authorization code")
        return Credentials.from_token(self.token)

    def refresh(self) -> Credentials:
        """Refresh the access token.

        Raises:
            CredentialsMissingError: If there is no refresh token.
            BadRequestError: If the refresh token is unknown or revoked.
            AuthenticationFailureError: If the client ID and secret are not valid.
        """
        if not self.refresh_token:
            raise CredentialsMissingError("No refresh token available")

        refresh_token = self.refresh_token
        session = self._session()
        token = self._call(
            lambda: session.refresh_token(self.token_url, refresh_token=refresh_token)
        )

        token = dict(token)
        # Cronofy may omit the refresh token when it is unchanged
        token.setdefault("refresh_token", refresh_token)
        self._save_token(token)

        self.last_refresh = datetime.now()
        logger.info("Access token refreshed")
        return Credentials.from_token(self.token)

    def revoke(self):
        """Revoke the account's tokens and clear local storage.

        The refresh token is revoked when present, the access token otherwise.
        """
        token = self.refresh_token or self.access_token
        if not token:
            logger.warning("No token to revoke")
            return

        session = self._session()
        response = self._call(lambda: session.revoke_token(self.revoke_url, token=token))
        _raise_for_status(response)

        self.token = None
        if self.token_path and self.token_path.exists():
            self.token_path.unlink()

        logger.info("Token revoked successfully")

    def _call(self, request):
        try:
            return request()
        except AuthlibBaseError as e:
            raise UnknownError(f"OAuth error: {e}") from e
        except requests.RequestException as e:
            raise UnknownError(f"Request failed: {e}") from e

    def _load_token(self) -> dict[str, Any] | None:
        """Load token from storage."""
        if not self.token_path.exists():
            logger.info("No existing token found")
            return None

        try:
            with open(self.token_path) as f:
                token = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load token from {self.token_path}: {e}")
            return None

        if not isinstance(token, dict) or not token.get("access_token"):
            logger.warning(f"Ignoring token file without access token: {self.token_path}")
            return None
        return token

    def _save_token(self, token: dict[str, Any]):
        self.token = token
        if not self.token_path:
            return

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(token, f, indent=2)
        logger.info(f"Token saved to {self.token_path}")

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the current token.

        Returns:
            Dictionary with token status, scopes and expiry.
        """
        if not self.token or not self.access_token:
            return {"status": "no_token"}

        expires_at = self.token.get("expires_at")
        if expires_at:
            is_expired = expires_at < datetime.now().timestamp()
            expires = datetime.fromtimestamp(expires_at).isoformat()
        else:
            is_expired = False
            expires = "unknown"

        return {
            "status": "expired" if is_expired else "valid",
            "scope": (self.token.get("scope") or "").split(),
            "expires_at": expires,
            "has_refresh_token": bool(self.refresh_token),
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
