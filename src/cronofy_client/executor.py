"""Authenticated request execution against the Cronofy API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

import httpx

from cronofy_client import __version__
from cronofy_client.config import api_url as default_api_url
from cronofy_client.exceptions import UnknownError, raise_if_error
from cronofy_client.paging import PagedQuery, PagedResultIterator
from cronofy_client.queries import to_iso8601

logger = logging.getLogger(__name__)

USER_AGENT = f"cronofy-client/{__version__}"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class TokenProvider(Protocol):
    """What the executor needs from the token holder."""

    def current_access_token(self) -> str: ...


@dataclass(frozen=True)
class RequestSpec:
    """A single API request, fully resolved before it is sent."""

    method: str
    url: str
    params: tuple[tuple[str, str], ...] = ()
    body: Any = None


def encode_params(params: dict[str, Any] | None) -> tuple[tuple[str, str], ...]:
    """String-encode query parameters, keeping their order.

    ``None`` values are dropped, booleans become ``true``/``false`` and
    sequences are sent as repeated ``key[]`` entries.
    """
    encoded: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded.extend((f"{key}[]", _encode_value(v)) for v in value)
        else:
            encoded.append((key, _encode_value(value)))
    return tuple(encoded)


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _json_default(value: Any) -> str:
    # datetime is a date subclass
    if isinstance(value, date):
        return to_iso8601(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class RequestExecutor:
    """Issues authenticated GET/POST/DELETE requests.

    Every request reads the current access token first; when there is none,
    CredentialsMissingError is raised and nothing is sent. Failed responses
    are raised as the mapped CronofyError subclass. Nothing is retried.

    Example:
        >>> executor = RequestExecutor(CronofyAuth(access_token="..."))
        >>> executor.get("/v1/calendars")
        {'calendars': [...]}
    """

    def __init__(
        self,
        auth: TokenProvider,
        api_url: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the executor.

        Args:
            auth: Token provider supplying the bearer token for each request.
            api_url: API base URL. Defaults to config.api_url().
            http_client: httpx client to send requests with (e.g. one using a
                mock transport). A client with a 30s timeout is created if None.
        """
        self.auth = auth
        self.api_url = (api_url or default_api_url()).rstrip("/")
        self._client = http_client or httpx.Client(timeout=30.0)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a resource. GET requests never carry a body."""
        return self.execute(RequestSpec("GET", self._url(path), encode_params(params)))

    def post(self, path: str, body: Any) -> Any:
        """POST a JSON body."""
        return self.execute(RequestSpec("POST", self._url(path), body=body))

    def delete(self, path: str, body: Any = None) -> Any:
        """DELETE a resource, with an optional JSON body."""
        return self.execute(RequestSpec("DELETE", self._url(path), body=body))

    def paged(
        self,
        decoder: Callable[[dict[str, Any]], Any],
        items_key: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> PagedResultIterator:
        """Create an iterator over a paged listing. The first page is fetched now."""
        return PagedResultIterator(self, PagedQuery(decoder, items_key, url, params or {}))

    def execute(self, spec: RequestSpec) -> Any:
        """Send a request and return the decoded JSON body.

        Returns:
            The decoded body, or None when the response has no content.

        Raises:
            CredentialsMissingError: If no access token is available.
            CronofyError: The mapped error for a non-2xx response, or
                UnknownError when the request could not be sent.
        """
        token = self.auth.current_access_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
        }
        content = None
        if spec.body is not None and spec.method != "GET":
            content = json.dumps(spec.body, default=_json_default).encode("utf-8")
            headers["Content-Type"] = JSON_CONTENT_TYPE

        logger.debug(f"{spec.method} {spec.url}")

        try:
            response = self._client.request(
                spec.method,
                spec.url,
                params=spec.params or None,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise UnknownError(f"Request failed: {e}") from e

        raise_if_error(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UnknownError(
                f"Unparseable response body (HTTP {response.status_code})",
                status=response.status_code,
                body=response.text,
            ) from e

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_url}{path}"

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
