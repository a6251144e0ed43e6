"""Cronofy domain types and response decoding."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class EventTime:
    """Start or end of an event.

    ``time`` is a date for all-day events and an aware datetime otherwise.
    ``tzid`` is only present when localized times were requested.
    """

    time: date | datetime
    tzid: str | None = None

    @classmethod
    def from_value(cls, value: Any) -> EventTime | None:
        """Decode the string or ``{"time", "tzid"}`` forms the API returns."""
        if value is None:
            return None
        if isinstance(value, dict):
            inner = cls.from_value(value.get("time"))
            if inner is None:
                return None
            return cls(time=inner.time, tzid=value.get("tzid"))
        if len(value) == 10:
            return cls(time=date.fromisoformat(value))
        return cls(time=_parse_timestamp(value))


@dataclass
class Account:
    """The account the access token belongs to."""

    account_id: str
    email: str | None = None
    name: str | None = None
    default_tzid: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        return cls(
            account_id=data.get("account_id", ""),
            email=data.get("email"),
            name=data.get("name"),
            default_tzid=data.get("default_tzid"),
            raw=data,
        )


@dataclass
class Calendar:
    """A calendar within one of the account's profiles."""

    calendar_id: str
    calendar_name: str = ""
    provider_name: str | None = None
    profile_id: str | None = None
    profile_name: str | None = None
    calendar_readonly: bool = False
    calendar_deleted: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Calendar:
        return cls(
            calendar_id=data.get("calendar_id", ""),
            calendar_name=data.get("calendar_name", ""),
            provider_name=data.get("provider_name"),
            profile_id=data.get("profile_id"),
            profile_name=data.get("profile_name"),
            calendar_readonly=data.get("calendar_readonly", False),
            calendar_deleted=data.get("calendar_deleted", False),
            raw=data,
        )


@dataclass
class Channel:
    """A push notification channel."""

    channel_id: str
    callback_url: str | None = None
    filters: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Channel:
        return cls(
            channel_id=data.get("channel_id", ""),
            callback_url=data.get("callback_url"),
            filters=data.get("filters") or {},
            raw=data,
        )


@dataclass
class Event:
    """A calendar event as returned by the read events endpoint."""

    calendar_id: str
    event_uid: str | None = None
    event_id: str | None = None
    summary: str = ""
    description: str | None = None
    start: EventTime | None = None
    end: EventTime | None = None
    deleted: bool = False
    location: dict[str, Any] | None = None
    participation_status: str | None = None
    transparency: str | None = None
    event_status: str | None = None
    categories: list[str] = field(default_factory=list)
    attendees: list[dict[str, Any]] = field(default_factory=list)
    created: datetime | None = None
    updated: datetime | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        return cls(
            calendar_id=data.get("calendar_id", ""),
            event_uid=data.get("event_uid"),
            event_id=data.get("event_id"),
            summary=data.get("summary") or "",
            description=data.get("description"),
            start=EventTime.from_value(data.get("start")),
            end=EventTime.from_value(data.get("end")),
            deleted=data.get("deleted", False),
            location=data.get("location"),
            participation_status=data.get("participation_status"),
            transparency=data.get("transparency"),
            event_status=data.get("status"),
            categories=data.get("categories") or [],
            attendees=data.get("attendees") or [],
            created=_parse_timestamp(data.get("created")),
            updated=_parse_timestamp(data.get("updated")),
            raw=data,
        )


@dataclass
class FreeBusy:
    """A busy period in one of the account's calendars."""

    calendar_id: str
    start: EventTime | None = None
    end: EventTime | None = None
    free_busy_status: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FreeBusy:
        return cls(
            calendar_id=data.get("calendar_id", ""),
            start=EventTime.from_value(data.get("start")),
            end=EventTime.from_value(data.get("end")),
            free_busy_status=data.get("free_busy_status"),
            raw=data,
        )


@dataclass
class Profile:
    """A calendar provider connection (Google, Exchange, iCloud, ...)."""

    profile_id: str
    profile_name: str | None = None
    provider_name: str | None = None
    profile_connected: bool = True
    profile_relink_url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        return cls(
            profile_id=data.get("profile_id", ""),
            profile_name=data.get("profile_name"),
            provider_name=data.get("provider_name"),
            profile_connected=data.get("profile_connected", True),
            profile_relink_url=data.get("profile_relink_url"),
            raw=data,
        )


@dataclass
class Pages:
    """Pagination metadata for one page of a listing."""

    current: int = 1
    total: int = 1
    next_page: str | None = None

    @property
    def has_next(self) -> bool:
        return self.next_page is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Pages:
        data = data or {}
        return cls(
            current=data.get("current", 1),
            total=data.get("total", 1),
            next_page=data.get("next_page") or None,
        )


@dataclass
class Page:
    """One decoded page of a listing: pagination metadata plus item collections."""

    pages: Pages
    collections: dict[str, list[Any]] = field(default_factory=dict)

    def __getitem__(self, key: str) -> list[Any]:
        return self.collections.get(key, [])

    @classmethod
    def decoder(cls, item_type: type, key: str) -> Callable[[dict[str, Any]], Page]:
        """Build a page decoder for the ``key`` collection of ``item_type`` items."""

        def decode(data: dict[str, Any]) -> Page:
            items = [item_type.from_dict(item) for item in data.get(key) or []]
            return cls(pages=Pages.from_dict(data.get("pages")), collections={key: items})

        return decode


EVENTS_PAGE = Page.decoder(Event, "events")
FREE_BUSY_PAGE = Page.decoder(FreeBusy, "free_busy")


class ResponseParser:
    """Maps a decoded response body onto domain types."""

    def __init__(self, data: dict[str, Any] | None):
        self.data = data or {}

    def parse_json(self, item_type: type, attr: str | None = None) -> Any:
        """Decode a single object, optionally nested under ``attr``."""
        data = (self.data.get(attr) or {}) if attr else self.data
        return item_type.from_dict(data)

    def parse_collection(self, item_type: type, attr: str) -> list[Any]:
        """Decode the list found under ``attr``, preserving server order."""
        return [item_type.from_dict(item) for item in self.data.get(attr) or []]
