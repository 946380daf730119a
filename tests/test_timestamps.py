from datetime import datetime, timedelta, timezone

import pytest

from errors import MalformedTimestamp
from timestamps import format_timestamp, normalize, parse_timestamp


class TestParse:
    def test_valid(self):
        assert parse_timestamp("20240310T000000") == datetime(2024, 3, 10)

    def test_with_time(self):
        assert parse_timestamp("20240105T123059") == datetime(2024, 1, 5, 12, 30, 59)

    @pytest.mark.parametrize("text", [
        "",
        "2024-03-10T00:00:00",
        "2024310T000000",
        "20240310T00000",
        "20240310 000000",
        "20241310T000000",   # month 13
        "20240230T000000",   # Feb 30
        "20240310T250000",
        "20240310T000000Z",
        " 20240310T000000",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedTimestamp):
            parse_timestamp(text)

    def test_not_a_string(self):
        with pytest.raises(MalformedTimestamp):
            parse_timestamp(None)


class TestRoundTrip:
    @pytest.mark.parametrize("text", ["20240310T000000", "19991231T235959", "20240229T120000"])
    def test_format_parse(self, text):
        assert format_timestamp(parse_timestamp(text)) == text

    def test_parse_format(self):
        t = datetime(2023, 7, 4, 9, 8, 7)
        assert parse_timestamp(format_timestamp(t)) == t


class TestNormalize:
    def test_drops_microseconds(self):
        assert format_timestamp(datetime(2024, 3, 10, 1, 2, 3, 999999)) == "20240310T010203"

    def test_aware_converted_to_utc(self):
        t = datetime(2024, 3, 10, 2, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert normalize(t) == datetime(2024, 3, 10, 0, 0, 0)
        assert normalize(t).tzinfo is None


class TestEarlyYears:
    @pytest.mark.parametrize("t", [datetime(999, 12, 31, 23, 59, 59), datetime(1, 1, 1), datetime(45, 6, 7, 8, 9, 10)])
    def test_year_zero_padded(self, t):
        text = format_timestamp(t)
        assert len(text) == 15
        assert parse_timestamp(text) == t

    def test_parse_padded_year(self):
        assert parse_timestamp("09991231T235959") == datetime(999, 12, 31, 23, 59, 59)

    def test_year_zero_rejected(self):
        with pytest.raises(MalformedTimestamp):
            parse_timestamp("00000101T000000")
