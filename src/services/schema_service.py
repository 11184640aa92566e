"""Registration schema definitions and record validation."""
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional

from src.models.choices import (
    GENDER_OPTIONS,
    GRADE_OPTIONS,
    MAX_ACCOMPANYING_PERSONS,
    MAX_EXHIBITORS,
    MIN_EMERGENCY_CONTACTS,
    TSHIRT_SIZE_OPTIONS,
)
from src.models.form_state import FLOW_CREATE, FLOW_EDIT, FormState
from src.services.attachment_service import format_size, is_attachment_value, is_within_size_limit
from src.services.config_service import FormSettings
from src.utils.schema import ArrayOf, Field, Refinement, Schema, refine, required
from src.utils.validation import (
    birthday_rules,
    choice_rules,
    email_rules,
    identity_number_rules,
    phone_rules,
    team_name_rules,
    team_size_rules,
)


def _team_size_matches_members(values: Dict[str, Any]) -> bool:
    """Member count must equal the chosen team size once one is chosen."""
    team_size = values.get("teamSize")
    try:
        expected = int(team_size)
    except (TypeError, ValueError):
        return True
    return len(values.get("teamMembers") or []) == expected


def _team_size_locked(values: Dict[str, Any]) -> bool:
    """In the edit flow teamSize mirrors the fetched member count."""
    return str(values.get("teamSize")) == str(len(values.get("teamMembers") or []))


def _attachment_field(label: str, max_bytes: int) -> Field:
    return Field(rules=[
        required(f"請上傳{label}"),
        refine(is_attachment_value, f"{label}檔案格式不正確"),
        refine(lambda value: is_within_size_limit(value, max_bytes), f"檔案大小不可超過 {format_size(max_bytes)}"),
    ])


@lru_cache(maxsize=16)
def build_registration_schema(
    flow: str = FLOW_CREATE,
    mobile_prefix: str = "09",
    emergency_contact_max: int = 2,
    with_attachments: bool = False,
    attachment_max_bytes: int = 5 * 1024 * 1024,
) -> Schema:
    """
    Build the registration schema for one flow variant.

    Args:
        flow: FLOW_CREATE or FLOW_EDIT
        mobile_prefix: Required phone prefix
        emergency_contact_max: Per-member cap on emergency contacts
        with_attachments: Whether members carry ID card attachments
        attachment_max_bytes: Per-attachment size cap

    Returns:
        Schema over the wire-shaped record
    """
    emergency_contact = Schema({
        "name": Field([required("緊急聯絡人姓名必填")]),
        "relationship": Field([required("關係必填")]),
        "phone": Field(phone_rules(mobile_prefix, "電話號碼")),
    })

    member_fields = {
        "name": Field([required("姓名必填")]),
        "gender": Field(choice_rules(GENDER_OPTIONS, "性別是必填欄位")),
        "school": Field([required("學校必填")]),
        "grade": Field(choice_rules(GRADE_OPTIONS, "年級是必填欄位")),
        "identityNumber": Field(identity_number_rules()),
        "birthday": Field(birthday_rules()),
        "email": Field(email_rules()),
        "phone": Field(phone_rules(mobile_prefix, "手機號碼")),
        "emergencyContacts": ArrayOf(
            emergency_contact,
            min_items=MIN_EMERGENCY_CONTACTS,
            max_items=emergency_contact_max,
            min_message="至少需要一位緊急聯絡人",
            max_message=f"最多 {emergency_contact_max} 位緊急聯絡人",
        ),
        "allergies": Field(optional=True),
        "specialDiseases": Field(optional=True),
        "remarks": Field(optional=True),
        "tShirtSize": Field(choice_rules(TSHIRT_SIZE_OPTIONS, "T-shirt 尺碼必填")),
    }
    if with_attachments:
        member_fields["idCardFront"] = _attachment_field("證件正面", attachment_max_bytes)
        member_fields["idCardBack"] = _attachment_field("證件反面", attachment_max_bytes)

    accompanying_person = Schema({
        "name": Field([required("姓名必填")]),
        "email": Field(email_rules()),
        "phone": Field(phone_rules(mobile_prefix, "電話號碼")),
    })

    exhibitor = Schema({
        "name": Field([required("姓名必填")]),
        "email": Field(email_rules()),
    })

    if flow == FLOW_EDIT:
        team_size = Field([required("請選擇參賽團隊人數")])
        refinements = [Refinement("teamSize", _team_size_locked, "參賽團隊人數無法變更")]
    else:
        team_size = Field(team_size_rules())
        refinements = [Refinement("teamMembers", _team_size_matches_members, "團隊成員人數與參賽人數不符")]

    return Schema(
        {
            "teamName": Field(team_name_rules()),
            "teamSize": team_size,
            "teamMembers": ArrayOf(
                Schema(member_fields),
                min_items=1,
                min_message="至少需要一位團隊成員",
            ),
            "accompanyingPersons": ArrayOf(
                accompanying_person,
                max_items=MAX_ACCOMPANYING_PERSONS,
                max_message=f"最多 {MAX_ACCOMPANYING_PERSONS} 位陪伴人",
            ),
            "exhibitors": ArrayOf(
                exhibitor,
                max_items=MAX_EXHIBITORS,
                max_message=f"最多 {MAX_EXHIBITORS} 位參展人",
            ),
        },
        refinements=refinements,
    )


def schema_for(state: FormState, settings: FormSettings) -> Schema:
    """Pick the schema variant matching a form session."""
    return build_registration_schema(
        flow=state.flow,
        mobile_prefix=settings.mobile_prefix,
        emergency_contact_max=settings.emergency_contact_max,
        with_attachments=state.with_attachments,
        attachment_max_bytes=settings.attachment_max_bytes,
    )


def validate_record(state: FormState, settings: FormSettings, only: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """
    Validate a session's record.

    Args:
        state: Form session holding the record
        settings: Form settings (prefix, caps)
        only: Path prefixes to restrict validation to; None validates all

    Returns:
        Dict of field path → error message; empty when valid
    """
    return schema_for(state, settings).validate(state.values, only=only)
