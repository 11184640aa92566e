"""Field validation rules for team registration.

The ``*_rules`` builders return ordered rule chains consumed by the schema
validator; the ``validate_*`` functions run the same chains for a single value
and report ``(is_valid, error_message)``.
"""
import re
from typing import Any, List, Sequence, Tuple

from src.models.choices import TEAM_SIZE_OPTIONS
from src.utils.date_utils import parse_birthday
from src.utils.schema import Rule, length, max_length, min_length, one_of, pattern, refine, required

DEFAULT_MOBILE_PREFIX = "09"

EMAIL_PATTERN = r"[^\s@]+@[^\s@]+\.[^\s@]+"


def phone_rules(prefix: str = DEFAULT_MOBILE_PREFIX, label: str = "電話號碼") -> List[Rule]:
    """
    Rule chain for a mobile phone number.

    Args:
        prefix: Required two-digit mobile prefix
        label: Field label used in messages ("電話號碼" or "手機號碼")

    Returns:
        Rules in evaluation order: required, 10 chars, digits only, prefix
    """
    return [
        required(f"{label}必填"),
        length(10, f"{label}必須為 10 碼"),
        pattern(r"[0-9]{10}", f"{label}只能包含數字"),
        refine(lambda value: value.startswith(prefix), f"{label}必須以 {prefix} 開頭"),
    ]


def email_rules(required_message: str = "Email 必填") -> List[Rule]:
    return [
        required(required_message),
        pattern(EMAIL_PATTERN, "Email 格式不正確"),
    ]


def team_name_rules() -> List[Rule]:
    return [
        required("請輸入團隊名稱"),
        min_length(2, "團隊名稱至少 2 個字"),
        max_length(30, "團隊名稱最多 30 個字"),
    ]


def team_size_rules() -> List[Rule]:
    return [
        required("請選擇參賽團隊人數"),
        one_of(TEAM_SIZE_OPTIONS, "請選擇參賽團隊人數"),
    ]


def identity_number_rules() -> List[Rule]:
    return [
        required("身份字號必填"),
        length(10, "身份字號必須為 10 碼"),
    ]


def birthday_rules() -> List[Rule]:
    return [
        required("生日必填"),
        refine(lambda value: parse_birthday(value) is not None, "生日格式錯誤"),
    ]


def choice_rules(choices: Sequence[str], message: str) -> List[Rule]:
    return [
        required(message),
        one_of(choices, message),
    ]


def run_rules(rules: Sequence[Rule], value: Any) -> Tuple[bool, str]:
    """
    Evaluate a rule chain against one value.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if every rule passes
        - (False, message) for the first failing rule
    """
    for rule in rules:
        message = rule.check(value)
        if message:
            return False, message
    return True, ""


def validate_phone(phone: str, prefix: str = DEFAULT_MOBILE_PREFIX) -> Tuple[bool, str]:
    """
    Validate a mobile phone number.

    Args:
        phone: Phone number to validate
        prefix: Required mobile prefix (default "09")

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if 10 digits starting with prefix
        - (False, "電話號碼必須為 10 碼") if length is wrong
        - (False, "電話號碼只能包含數字") if it contains non-digits
        - (False, "電話號碼必須以 09 開頭") if prefix doesn't match
    """
    return run_rules(phone_rules(prefix), phone)


def validate_email(email: str) -> Tuple[bool, str]:
    """Validate an email address; returns (is_valid, error_message)."""
    return run_rules(email_rules(), email)


def validate_team_name(name: str) -> Tuple[bool, str]:
    """
    Validate team name.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (False, "團隊名稱至少 2 個字") if shorter than 2 characters
        - (False, "團隊名稱最多 30 個字") if longer than 30 characters
    """
    return run_rules(team_name_rules(), name)


def validate_team_size(team_size: str) -> Tuple[bool, str]:
    """Validate team size against the offered options ("2" is not one of them)."""
    return run_rules(team_size_rules(), team_size)


def validate_identity_number(identity_number: str) -> Tuple[bool, str]:
    return run_rules(identity_number_rules(), identity_number)


def validate_birthday(birthday: str) -> Tuple[bool, str]:
    return run_rules(birthday_rules(), birthday)


def normalize_phone(phone: str) -> str:
    """
    Normalize phone input before storing it.

    Behavior:
        - Removes spaces, dashes and parentheses
        - Example: "0912-345 678" → "0912345678"
    """
    if not isinstance(phone, str):
        return ""
    return re.sub(r"[\s\-()]", "", phone)
