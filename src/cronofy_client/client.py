"""Cronofy API client."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

import httpx

from cronofy_client.auth import Credentials, CronofyAuth
from cronofy_client.executor import RequestExecutor
from cronofy_client.models import (
    EVENTS_PAGE,
    FREE_BUSY_PAGE,
    Account,
    Calendar,
    Channel,
    Profile,
    ResponseParser,
)
from cronofy_client.paging import PagedResultIterator
from cronofy_client.queries import EventsQuery, FreeBusyQuery, encode_event_time

# Requested when the caller does not specify a scope
DEFAULT_OAUTH_SCOPE = [
    "read_account",
    "read_events",
    "create_event",
    "delete_event",
]


class Client:
    """Cronofy API client.

    Errors from every operation are CronofyError subclasses. Operations that
    call the API raise CredentialsMissingError without sending anything when
    no access token is available, AuthenticationFailureError when the access
    token is no longer valid and TooManyRequestsError when the application's
    rate limits are exceeded. Nothing is retried: on AuthenticationFailureError
    call refresh_access_token() and repeat the operation.

    Usage:
        client = Client(access_token="...", refresh_token="...")

        # List calendars
        calendars = client.list_calendars()

        # Create or update an event
        client.upsert_event(
            "cal_n23kjnwrw2_jsdfjksn234",
            {
                "event_id": "qTtZdczOccgaPncGJaCiLg",
                "summary": "Board meeting",
                "start": datetime(2014, 8, 5, 15, 30, tzinfo=timezone.utc),
                "end": datetime(2014, 8, 5, 17, 30, tzinfo=timezone.utc),
                "location": {"description": "Board room"},
            },
        )

        # Read events lazily, page by page
        for event in client.read_events(from_=date(2014, 8, 1)):
            print(event.summary)
    """

    def __init__(
        self,
        access_token: str | None = None,
        refresh_token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        token_path: str | Path | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            access_token: Existing access token for the account.
            refresh_token: Existing refresh token for the account.
            client_id: OAuth client ID. If None, reads from CRONOFY_CLIENT_ID.
            client_secret: OAuth client secret. If None, reads from CRONOFY_CLIENT_SECRET.
            token_path: JSON token file to load tokens from and save them to.
            http_client: httpx client used for API requests.
        """
        self.auth = CronofyAuth(
            client_id=client_id,
            client_secret=client_secret,
            access_token=access_token,
            refresh_token=refresh_token,
            token_path=token_path,
        )
        self.executor = RequestExecutor(self.auth, http_client=http_client)

    # =========================================================================
    # Calendars
    # =========================================================================

    def list_calendars(self) -> list[Calendar]:
        """List all the calendars for the account."""
        response = self.executor.get("/v1/calendars")
        return ResponseParser(response).parse_collection(Calendar, "calendars")

    # =========================================================================
    # Events
    # =========================================================================

    def upsert_event(self, calendar_id: str, event: dict[str, Any]) -> None:
        """Create or update an event in a calendar.

        Args:
            calendar_id: Cronofy ID of the calendar.
            event: Event description. ``event_id`` is your application's ID
                for the event. ``start`` and ``end`` are datetimes, dates or
                ``{"time": ..., "tzid": ...}`` mappings; they are sent as
                ISO-8601 UTC strings.

        Raises:
            AuthorizationFailureError: If the token lacks the create_event scope.
            NotFoundError: If the calendar does not exist.
            InvalidRequestError: If the event is not valid.
        """
        body = dict(event)
        for key in ("start", "end"):
            if key in body:
                body[key] = encode_event_time(body[key])

        self.executor.post(f"/v1/calendars/{calendar_id}/events", body)

    create_or_update_event = upsert_event

    def read_events(self, query: EventsQuery | None = None, **options: Any) -> PagedResultIterator:
        """Read events matching the query.

        The first page is retrieved now so that errors happen inline.
        Later pages are requested lazily during iteration.

        Args:
            query: Query options. Defaults to EventsQuery().
            **options: EventsQuery fields overriding those of ``query``.

        Returns:
            Re-iterable sequence of Event.

        Raises:
            AuthorizationFailureError: If the token lacks the read_events scope.
            InvalidRequestError: If the query parameters are not valid.
        """
        query = replace(query or EventsQuery(), **options)
        return self.executor.paged(EVENTS_PAGE, "events", "/v1/events", query.to_params())

    def free_busy(self, query: FreeBusyQuery | None = None, **options: Any) -> PagedResultIterator:
        """Read free/busy periods matching the query.

        Pages are fetched the same way as read_events().

        Returns:
            Re-iterable sequence of FreeBusy.
        """
        query = replace(query or FreeBusyQuery(), **options)
        return self.executor.paged(FREE_BUSY_PAGE, "free_busy", "/v1/free_busy", query.to_params())

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Delete an event from a calendar.

        Args:
            calendar_id: Cronofy ID of the calendar.
            event_id: Your application's ID for the event.
        """
        self.executor.delete(f"/v1/calendars/{calendar_id}/events", {"event_id": event_id})

    def delete_all_events(self) -> None:
        """Delete all events managed by your application for the account."""
        self.executor.delete("/v1/events", {"delete_all": True})

    # =========================================================================
    # Channels
    # =========================================================================

    def create_channel(self, callback_url: str) -> Channel:
        """Create a notification channel that posts changes to ``callback_url``."""
        response = self.executor.post("/v1/channels", {"callback_url": callback_url})
        return ResponseParser(response).parse_json(Channel, "channel")

    def list_channels(self) -> list[Channel]:
        response = self.executor.get("/v1/channels")
        return ResponseParser(response).parse_collection(Channel, "channels")

    def close_channel(self, channel_id: str) -> None:
        """Close a notification channel.

        Raises:
            NotFoundError: If the channel does not exist.
        """
        self.executor.delete(f"/v1/channels/{channel_id}")

    # =========================================================================
    # Account
    # =========================================================================

    def account(self) -> Account:
        response = self.executor.get("/v1/account")
        return ResponseParser(response).parse_json(Account, "account")

    def list_profiles(self) -> list[Profile]:
        response = self.executor.get("/v1/profiles")
        return ResponseParser(response).parse_collection(Profile, "profiles")

    # =========================================================================
    # Authorization
    # =========================================================================

    def user_auth_link(
        self,
        redirect_uri: str,
        scope: list[str] | None = None,
        state: str | None = None,
    ) -> str:
        """Build the URL to send the user to for OAuth authorization.

        Args:
            redirect_uri: Where the user returns once authorization is complete.
            scope: Scopes to request. Defaults to DEFAULT_OAUTH_SCOPE.
            state: Value to retain during the authorization process.
        """
        return self.auth.user_auth_link(redirect_uri, scope or DEFAULT_OAUTH_SCOPE, state)

    def get_token_from_code(self, code: str, redirect_uri: str) -> Credentials:
        """Retrieve the credentials authorized for a code and redirect URI pair."""
        return self.auth.get_token_from_code(code, redirect_uri)

    def refresh_access_token(self) -> Credentials:
        """Refresh the account's access token.

        Usually called after an AuthenticationFailureError, which most often
        means the access token has expired.
        """
        return self.auth.refresh()

    def revoke_authorization(self) -> None:
        """Revoke the account's refresh and access tokens.

        The client is unusable afterwards.
        """
        self.auth.revoke()

    def close(self):
        """Close the HTTP client."""
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Deprecated name kept for backwards compatibility
Cronofy = Client
