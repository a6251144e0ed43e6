"""Query options for the paged listing endpoints and time value encoding."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from typing import Any

DEFAULT_TZID = "Etc/UTC"


def to_iso8601(value: Any) -> str | None:
    """Encode a time value for transmission.

    Datetimes are converted to UTC (naive values are taken to be UTC already),
    dates keep their own ``YYYY-MM-DD`` form and strings pass through.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None, microsecond=0).isoformat() + "Z"
    if isinstance(value, date):
        return value.isoformat()
    return value


def encode_event_time(value: Any) -> Any:
    """Encode an event start/end, which may be a ``{"time", "tzid"}`` mapping."""
    if isinstance(value, dict):
        if value.get("time") is None:
            return value
        return {**value, "time": to_iso8601(value["time"])}
    return to_iso8601(value)


@dataclass(frozen=True)
class _Query:
    """Shared parameter encoding for the listing queries.

    Field names match the API parameter names, except ``from_`` which is sent
    as ``from``.
    """

    time_params = ("from_", "to")

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name in self.time_params:
                value = to_iso8601(value)
            params[f.name.rstrip("_")] = value
        return params


@dataclass(frozen=True)
class EventsQuery(_Query):
    """Options for reading events.

    Attributes:
        from_: Earliest date to return events from.
        to: Date to return events up until.
        tzid: IANA time zone used to interpret dates.
        include_deleted: Include events that have been deleted.
        include_moved: Include events that ever existed within the window.
        include_managed: Include events managed by this application.
        only_managed: Only return events managed by this application.
        localized_times: Return start and end times with time zone details.
        last_modified: Only return events modified on or after this time.
        calendar_ids: Restrict results to these calendars.
    """

    time_params = ("from_", "to", "last_modified")

    from_: date | datetime | str | None = None
    to: date | datetime | str | None = None
    tzid: str = DEFAULT_TZID
    include_deleted: bool | None = None
    include_moved: bool | None = None
    include_managed: bool | None = None
    only_managed: bool | None = None
    localized_times: bool | None = None
    last_modified: datetime | str | None = None
    calendar_ids: tuple[str, ...] | list[str] | None = None


@dataclass(frozen=True)
class FreeBusyQuery(_Query):
    """Options for reading free/busy periods.

    Attributes:
        from_: Earliest date to return periods from.
        to: Date to return periods up until.
        tzid: IANA time zone used to interpret dates.
        include_managed: Include events managed by this application.
        localized_times: Return start and end times with time zone details.
        calendar_ids: Restrict results to these calendars.
    """

    from_: date | datetime | str | None = None
    to: date | datetime | str | None = None
    tzid: str = DEFAULT_TZID
    include_managed: bool | None = None
    localized_times: bool | None = None
    calendar_ids: tuple[str, ...] | list[str] | None = None
