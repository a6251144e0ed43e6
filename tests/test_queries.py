"""Tests for query options and time encoding."""

from datetime import date, datetime, timedelta, timezone

import pytest

from cronofy_client.queries import (
    EventsQuery,
    FreeBusyQuery,
    encode_event_time,
    to_iso8601,
)


class TestToIso8601:
    """Test time value encoding."""

    def test_none(self):
        assert to_iso8601(None) is None

    def test_utc_datetime(self):
        value = datetime(2014, 8, 5, 15, 30, tzinfo=timezone.utc)
        assert to_iso8601(value) == "2014-08-05T15:30:00Z"

    def test_offset_datetime_converted_to_utc(self):
        value = datetime(2014, 8, 5, 1, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert to_iso8601(value) == "2014-08-05T06:30:00Z"

    def test_naive_datetime_taken_as_utc(self):
        assert to_iso8601(datetime(2014, 8, 5, 15, 30, 12, 999)) == "2014-08-05T15:30:12Z"

    def test_date(self):
        """Should keep date-only values in their own form."""
        assert to_iso8601(date(2014, 8, 5)) == "2014-08-05"

    def test_string_passes_through(self):
        assert to_iso8601("2014-08-05T15:30:00Z") == "2014-08-05T15:30:00Z"


class TestEncodeEventTime:
    def test_plain_time(self):
        value = datetime(2014, 8, 5, 15, 30, tzinfo=timezone.utc)
        assert encode_event_time(value) == "2014-08-05T15:30:00Z"

    def test_time_with_tzid(self):
        value = {"time": datetime(2014, 8, 5, 15, 30, tzinfo=timezone.utc), "tzid": "Europe/Paris"}
        assert encode_event_time(value) == {"time": "2014-08-05T15:30:00Z", "tzid": "Europe/Paris"}

    def test_mapping_without_time(self):
        """Should leave mappings without a time untouched."""
        assert encode_event_time({"tzid": "Europe/Paris"}) == {"tzid": "Europe/Paris"}


class TestEventsQuery:
    """Test events query parameters."""

    def test_defaults(self):
        assert EventsQuery().to_params() == {"tzid": "Etc/UTC"}

    def test_all_options(self):
        query = EventsQuery(
            from_=date(2014, 8, 1),
            to=datetime(2014, 8, 31, 23, 0, tzinfo=timezone.utc),
            tzid="Europe/London",
            include_deleted=True,
            include_moved=False,
            include_managed=True,
            only_managed=False,
            localized_times=True,
            last_modified=datetime(2014, 7, 1, tzinfo=timezone.utc),
            calendar_ids=["cal_1"],
        )

        assert query.to_params() == {
            "from": "2014-08-01",
            "to": "2014-08-31T23:00:00Z",
            "tzid": "Europe/London",
            "include_deleted": True,
            "include_moved": False,
            "include_managed": True,
            "only_managed": False,
            "localized_times": True,
            "last_modified": "2014-07-01T00:00:00Z",
            "calendar_ids": ["cal_1"],
        }

    def test_immutable(self):
        query = EventsQuery()
        with pytest.raises(AttributeError):
            query.tzid = "Europe/London"


class TestFreeBusyQuery:
    def test_params(self):
        query = FreeBusyQuery(from_=date(2014, 8, 1), include_managed=True)
        assert query.to_params() == {
            "from": "2014-08-01",
            "tzid": "Etc/UTC",
            "include_managed": True,
        }

    def test_no_event_only_options(self):
        """Should reject options that only apply to events."""
        with pytest.raises(TypeError):
            FreeBusyQuery(last_modified=datetime(2014, 7, 1))
