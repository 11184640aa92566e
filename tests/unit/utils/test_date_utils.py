"""Unit tests for date utilities."""
import pytest
from datetime import date, datetime
from src.utils.date_utils import parse_birthday, parse_date, to_date_string


class TestParseDate:
    """Test date parsing."""

    def test_parse_valid_date(self):
        """Test parsing valid YYYY-MM-DD date."""
        result = parse_date("2008-11-15")
        assert isinstance(result, datetime)
        assert (result.year, result.month, result.day) == (2008, 11, 15)

    def test_parse_invalid_format_raises_error(self):
        """Test invalid date format raises ValueError."""
        with pytest.raises(ValueError):
            parse_date("15/11/2008")

    def test_parse_invalid_date_value_raises_error(self):
        """Test invalid date value raises ValueError."""
        with pytest.raises(ValueError):
            parse_date("2008-13-01")


class TestToDateString:
    """Test wire formatting of date picker values."""

    def test_date(self):
        """date objects use ISO format."""
        assert to_date_string(date(2008, 5, 1)) == "2008-05-01"

    def test_datetime_drops_time(self):
        """datetime objects keep only the date."""
        assert to_date_string(datetime(2008, 5, 1, 13, 30)) == "2008-05-01"

    def test_none(self):
        """Cleared picker becomes empty string."""
        assert to_date_string(None) == ""

    def test_string_passthrough(self):
        """Existing strings are kept as-is."""
        assert to_date_string("2008-05-01") == "2008-05-01"


class TestParseBirthday:
    """Test birthday parsing for pre-filling."""

    def test_plain_date(self):
        """Plain dates parse."""
        assert parse_birthday("2008-05-01") == date(2008, 5, 1)

    def test_timestamp(self):
        """Only the date part of a timestamp is used."""
        assert parse_birthday("2008-05-01T16:00:00.000Z") == date(2008, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "2008-02-30", "not a date", 20080501])
    def test_unparseable_returns_none(self, value):
        """Anything else yields None."""
        assert parse_birthday(value) is None
