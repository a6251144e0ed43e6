"""Client for the Cronofy calendar API.

Usage:
    from cronofy_client import Client

    client = Client(access_token="...")

    # List calendars
    calendars = client.list_calendars()

    # Read events (lazily paged)
    for event in client.read_events(from_=date(2024, 1, 1)):
        print(event.summary)
"""

__version__ = "0.1.0"

from cronofy_client.auth import Credentials, CronofyAuth  # noqa: E402
from cronofy_client.client import DEFAULT_OAUTH_SCOPE, Client, Cronofy  # noqa: E402
from cronofy_client.exceptions import (  # noqa: E402
    AuthenticationFailureError,
    AuthorizationFailureError,
    BadRequestError,
    CredentialsMissingError,
    CronofyError,
    InvalidRequestError,
    NotFoundError,
    TooManyRequestsError,
    UnknownError,
)
from cronofy_client.queries import EventsQuery, FreeBusyQuery  # noqa: E402

__all__ = [
    "__version__",
    "Client",
    "Cronofy",
    "CronofyAuth",
    "Credentials",
    "DEFAULT_OAUTH_SCOPE",
    "EventsQuery",
    "FreeBusyQuery",
    "CronofyError",
    "CredentialsMissingError",
    "BadRequestError",
    "AuthenticationFailureError",
    "AuthorizationFailureError",
    "NotFoundError",
    "InvalidRequestError",
    "TooManyRequestsError",
    "UnknownError",
]
