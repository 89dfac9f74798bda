"""
Tests for column types and timestamp handling
"""

from datetime import datetime, timedelta, timezone

import pytest

from ghstream.core.types import (
    ZERO_TIME,
    DataType,
    Schema,
    format_timestamp,
    is_zero_timestamp,
    parse_timestamp,
)


class TestParseTimestamp:
    """Test RFC 3339 parsing"""

    def test_utc_z(self):
        assert parse_timestamp("2021-05-01T00:00:00Z") == datetime(2021, 5, 1, tzinfo=timezone.utc)

    def test_offset(self):
        parsed = parse_timestamp("2021-05-01T02:00:00+02:00")

        assert parsed == datetime(2021, 5, 1, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_naive_is_utc(self):
        assert parse_timestamp("2021-05-01T00:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "0001-01-01T00:00:00Z"])
    def test_missing_or_zero(self, value):
        assert parse_timestamp(value) is None

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    @pytest.mark.parametrize(
        "value, microsecond",
        [
            ("2021-05-01T00:00:00.12Z", 120000),
            ("2021-05-01T00:00:00.5+00:00", 500000),
            ("2021-05-01T00:00:00.123456789Z", 123456),
        ],
    )
    def test_fractional_seconds(self, value, microsecond):
        parsed = parse_timestamp(value)

        assert parsed.microsecond == microsecond
        assert parsed.tzinfo is not None


class TestFormatTimestamp:
    """Test RFC 3339 rendering"""

    def test_whole_seconds(self):
        value = datetime(2021, 5, 1, 12, 30, 5, tzinfo=timezone.utc)

        assert format_timestamp(value) == "2021-05-01T12:30:05Z"

    def test_fraction_trimmed(self):
        value = datetime(2021, 5, 1, 0, 0, 0, 120000, tzinfo=timezone.utc)

        assert format_timestamp(value) == "2021-05-01T00:00:00.12Z"

    def test_non_utc_offset(self):
        tz = timezone(timedelta(hours=-5, minutes=-30))
        value = datetime(2021, 5, 1, 8, 0, tzinfo=tz)

        assert format_timestamp(value) == "2021-05-01T08:00:00-05:30"

    def test_zero_and_none(self):
        assert format_timestamp(None) is None
        assert format_timestamp(ZERO_TIME) is None
        assert is_zero_timestamp(datetime(1, 1, 1))

    def test_parse_format_preserves_text(self):
        """Test GitHub's own format comes back unchanged"""
        assert format_timestamp(parse_timestamp("2019-11-20T17:01:02Z")) == "2019-11-20T17:01:02Z"


class TestDataType:
    def test_validate(self):
        assert DataType.INTEGER.validate(3)
        assert not DataType.INTEGER.validate("3")
        assert not DataType.INTEGER.validate(True)
        assert DataType.TEXT.validate("x")
        assert DataType.TIMESTAMP.validate(None)

    def test_is_textual(self):
        assert DataType.TIMESTAMP.is_textual()
        assert not DataType.INTEGER.is_textual()


class TestSchema:
    def test_lookup(self):
        schema = Schema({"name": DataType.TEXT, "stargazer_count": DataType.INTEGER})

        assert "name" in schema
        assert schema["stargazer_count"] == DataType.INTEGER
        assert schema.get_column_type("missing") is None
        assert schema.get_column_names() == ["name", "stargazer_count"]
        assert schema.to_dict() == {"name": "TEXT", "stargazer_count": "INTEGER"}

    def test_validate_column(self):
        schema = Schema({"name": DataType.TEXT})

        schema.validate_column("name")
        with pytest.raises(ValueError, match="not found"):
            schema.validate_column("age")
