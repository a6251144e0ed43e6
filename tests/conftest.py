"""Shared fixtures: an in-memory Cronofy API served through httpx.MockTransport."""

import httpx
import pytest

API = "https://api.cronofy.com"


class FakeCronofy:
    """Canned responses keyed by method and URL path, plus a request log."""

    def __init__(self):
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json=None, text=None):
        if json is not None:
            response = httpx.Response(status, json=json)
        elif text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status)
        self.routes[(method, path)] = response

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"error": "no route"})
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests independent of the developer's Cronofy settings."""
    for var in (
        "CRONOFY_API_URL",
        "CRONOFY_APP_URL",
        "CRONOFY_CLIENT_ID",
        "CRONOFY_CLIENT_SECRET",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def server():
    return FakeCronofy()


@pytest.fixture
def http_client(server):
    client = httpx.Client(transport=httpx.MockTransport(server.handle))
    yield client
    client.close()
