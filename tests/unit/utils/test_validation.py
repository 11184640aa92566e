"""Unit tests for field validation rules."""
import pytest
from src.utils.validation import (
    normalize_phone,
    validate_birthday,
    validate_email,
    validate_identity_number,
    validate_phone,
    validate_team_name,
    validate_team_size,
)


class TestValidatePhone:
    """Test mobile phone validation."""

    def test_valid_phone(self):
        """10 digits starting with 09 is valid."""
        assert validate_phone("0912345678") == (True, "")

    def test_empty_phone(self):
        """Empty phone reports required."""
        assert validate_phone("") == (False, "電話號碼必填")

    @pytest.mark.parametrize("phone", ["091234567", "09123456789"])
    def test_wrong_length(self, phone):
        """Length is checked before anything else."""
        assert validate_phone(phone) == (False, "電話號碼必須為 10 碼")

    def test_non_digits(self):
        """Letters with the right length report digits-only."""
        assert validate_phone("09123abcde") == (False, "電話號碼只能包含數字")

    def test_full_width_digits_rejected(self):
        """Only ASCII digits count."""
        assert validate_phone("０９１２３４５６７８")[0] is False

    def test_wrong_prefix(self):
        """Valid digits with another prefix report the prefix."""
        assert validate_phone("0812345678") == (False, "電話號碼必須以 09 開頭")

    def test_custom_prefix(self):
        """The prefix is configurable."""
        assert validate_phone("0812345678", prefix="08") == (True, "")


class TestValidateEmail:
    """Test email validation."""

    def test_valid_email(self):
        """Ordinary address is valid."""
        assert validate_email("amy@example.com") == (True, "")

    def test_missing_domain_dot(self):
        """Domain without a dot is rejected."""
        assert validate_email("amy@example") == (False, "Email 格式不正確")

    def test_empty_email(self):
        """Empty email reports required."""
        assert validate_email("") == (False, "Email 必填")


class TestValidateTeamName:
    """Test team name length bounds."""

    def test_empty(self):
        """Empty name asks for input."""
        assert validate_team_name("") == (False, "請輸入團隊名稱")

    def test_too_short(self):
        """One character is too short."""
        assert validate_team_name("A") == (False, "團隊名稱至少 2 個字")

    def test_too_long(self):
        """31 characters is too long."""
        assert validate_team_name("A" * 31) == (False, "團隊名稱最多 30 個字")

    @pytest.mark.parametrize("name", ["AB", "駭客", "A" * 30])
    def test_bounds_inclusive(self, name):
        """2 and 30 characters are accepted."""
        assert validate_team_name(name) == (True, "")


class TestValidateTeamSize:
    """Test the offered team sizes."""

    @pytest.mark.parametrize("size", ["1", "3", "4", "5", "6"])
    def test_offered_sizes(self, size):
        """Every offered option is valid."""
        assert validate_team_size(size)[0] is True

    @pytest.mark.parametrize("size", ["2", "7", "0", ""])
    def test_other_sizes_rejected(self, size):
        """"2" is not offered."""
        assert validate_team_size(size) == (False, "請選擇參賽團隊人數")


class TestValidateIdentityNumber:
    """Test identity number length."""

    def test_ten_characters(self):
        """Exactly 10 characters is valid."""
        assert validate_identity_number("A123456789") == (True, "")

    def test_wrong_length(self):
        """Other lengths are rejected."""
        assert validate_identity_number("A12345") == (False, "身份字號必須為 10 碼")


class TestValidateBirthday:
    """Test birthday parsing."""

    def test_plain_date(self):
        """YYYY-MM-DD is valid."""
        assert validate_birthday("2008-05-01") == (True, "")

    def test_iso_timestamp(self):
        """Backend timestamps are accepted."""
        assert validate_birthday("2008-05-01T00:00:00.000Z") == (True, "")

    def test_garbage(self):
        """Unparseable text is rejected."""
        assert validate_birthday("yesterday") == (False, "生日格式錯誤")


class TestNormalizePhone:
    """Test phone normalization."""

    def test_strips_separators(self):
        """Spaces, dashes and parentheses are removed."""
        assert normalize_phone("(0912)-345 678") == "0912345678"

    def test_non_string(self):
        """Non-strings become empty."""
        assert normalize_phone(None) == ""
