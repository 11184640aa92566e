"""Registration service: user-level operations over one form session."""
import logging
from typing import Any, Dict, Optional, Tuple

from src.models.form_state import (
    FLOW_CREATE,
    FLOW_EDIT,
    PHASE_NOT_FOUND,
    PHASE_SUBMITTED,
    FormState,
)
from src.services.attachment_service import materialize_attachments
from src.services.config_service import FormSettings
from src.services.list_service import (
    DynamicList,
    accompanying_persons_list,
    assign_item_keys,
    emergency_contacts_list,
    exhibitors_list,
    team_members_list,
)
from src.services.remote_service import RegistrationApi
from src.services.schema_service import validate_record
from src.services.wizard_service import StepValidator, Wizard
from src.utils.exceptions import AttachmentTooLargeError, RecordNotFoundError, SubmissionError, ValidationError
from src.utils.field_paths import in_scope, set_value, split_path
from src.utils.validation import normalize_phone

logger = logging.getLogger(__name__)

wizard = Wizard()

SUCCESS_MESSAGES = {
    FLOW_CREATE: "報名成功",
    FLOW_EDIT: "更改成功!如有更新電子郵件請重新驗證!",
}
SUBMIT_ERROR_MESSAGE = "出現未知的錯誤，請稍後再試一次"
NOT_FOUND_MESSAGE = "我們找不到您要的表單，請確認您的連結是否正確。"
INCOMPLETE_MESSAGE = "表單尚有未完成的欄位，請修正後再送出"
BUSY_MESSAGE = "表單正在送出中，請稍候"


def start_create_flow() -> FormState:
    """New, empty registration on step 1."""
    state = FormState(flow=FLOW_CREATE)
    assign_item_keys(state)
    return state


def start_edit_flow(secret: str, settings: FormSettings) -> FormState:
    """
    Edit session for a secret link, parked in the loading phase.

    Args:
        secret: Token from the edit URL
        settings: Form settings; attachments_enabled selects the ID card variant

    Returns:
        FormState with phase "loading"; call load_for_edit() next
    """
    state = FormState(flow=FLOW_EDIT, secret=secret, with_attachments=settings.attachments_enabled)
    wizard.begin_loading(state)
    return state


def prepare_fetched_record(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a fetched record for editing.

    Behavior:
        - teamSize is derived from the member count (and locked)
        - Missing/null accompanyingPersons and exhibitors become []

    Raises:
        RecordNotFoundError: If teamMembers isn't a list
    """
    values = dict(data)
    members = values.get("teamMembers")
    if members is None:
        members = []
    if not isinstance(members, list):
        raise RecordNotFoundError("Fetched record has no team member list")
    values["teamMembers"] = members
    values["teamSize"] = str(len(members))
    if not values.get("accompanyingPersons"):
        values["accompanyingPersons"] = []
    if not values.get("exhibitors"):
        values["exhibitors"] = []
    return values


def load_for_edit(state: FormState, api: RegistrationApi) -> Tuple[bool, str]:
    """
    Fetch the record for an edit session.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "") and phase "ready" on step 1
        - (False, NOT_FOUND_MESSAGE) and phase "not_found" otherwise
    """
    try:
        state.values = prepare_fetched_record(api.fetch_by_secret(state.secret))
    except RecordNotFoundError as e:
        logger.error(f"Edit link lookup failed: {e}")
        wizard.finish_loading(state, found=False)
        return False, NOT_FOUND_MESSAGE
    except Exception as e:
        logger.error(f"Unexpected error while loading edit link: {e}")
        wizard.finish_loading(state, found=False)
        return False, NOT_FOUND_MESSAGE

    assign_item_keys(state)
    state.observed_sizes["teamMembers"] = state.values["teamSize"]
    wizard.finish_loading(state, found=True)
    return True, ""


def is_editable(state: FormState) -> bool:
    """Fields can change only while ready (not loading, submitting or finished)."""
    return not state.is_busy and state.phase not in (PHASE_NOT_FOUND, PHASE_SUBMITTED)


def update_field(state: FormState, path: str, value: Any) -> bool:
    """
    Store one field value.

    Returns:
        False if the form is busy/finished or the field is locked
    """
    if not is_editable(state):
        return False
    if state.is_edit and path == "teamSize":
        return False

    if split_path(path)[-1:] == ["phone"]:
        value = normalize_phone(value)

    set_value(state.values, path, value)
    state.errors.pop(path, None)
    return True


def sync_team_size(state: FormState) -> int:
    """
    Grow teamMembers to match teamSize (create flow only).

    Returns:
        Number of members appended
    """
    if state.is_edit or not is_editable(state):
        return 0
    controller = team_members_list(state.with_attachments)
    return controller.resize_on_change(state, state.values.get("teamSize"))


def list_controller(state: FormState, settings: FormSettings, path: str) -> DynamicList:
    """
    Controller for a list path.

    Args:
        path: "teamMembers", "accompanyingPersons", "exhibitors" or
            "teamMembers.<i>.emergencyContacts"

    Raises:
        KeyError: For any other path
    """
    if path == "teamMembers":
        return team_members_list(state.with_attachments)
    if path == "accompanyingPersons":
        return accompanying_persons_list()
    if path == "exhibitors":
        return exhibitors_list()

    parts = split_path(path)
    if len(parts) == 3 and parts[0] == "teamMembers" and isinstance(parts[1], int) and parts[2] == "emergencyContacts":
        return emergency_contacts_list(parts[1], settings.emergency_contact_max)
    raise KeyError(f"Not a dynamic list: {path}")


def add_item(state: FormState, settings: FormSettings, path: str, item: Optional[Dict[str, Any]] = None) -> bool:
    """Append to a list; False when the form is locked or the list is full."""
    if not is_editable(state):
        return False
    return list_controller(state, settings, path).append(state, item)


def remove_item(state: FormState, settings: FormSettings, path: str, index: int) -> bool:
    """
    Remove one list item.

    Error entries under the list are dropped because their indices shifted.
    """
    if not is_editable(state):
        return False
    removed = list_controller(state, settings, path).remove(state, index)
    if removed:
        state.errors = {
            error_path: message
            for error_path, message in state.errors.items()
            if not in_scope(error_path, [path])
        }
    return removed


def step_validator(state: FormState, settings: FormSettings) -> StepValidator:
    return lambda fields: validate_record(state, settings, only=fields)


def go_next(state: FormState, settings: FormSettings) -> bool:
    """
    Advance the wizard if the current step validates.

    Errors of the current step are stored on state.errors for inline display.
    """
    advanced, errors = wizard.next(state, step_validator(state, settings))
    state.errors = errors
    if advanced:
        sync_team_size(state)
    return advanced


def go_prev(state: FormState) -> bool:
    """Back one step; always allowed unless busy, keeps every value."""
    moved = wizard.prev(state)
    if moved:
        state.errors = {}
    return moved


def build_payload(state: FormState, settings: FormSettings) -> Dict[str, Any]:
    """
    Outbound copy of the record with attachments encoded; state is untouched.

    Raises:
        ValidationError: If the record doesn't validate
        AttachmentTooLargeError: If an attachment exceeds the size cap
    """
    errors = validate_record(state, settings)
    if errors:
        raise ValidationError(errors)
    return materialize_attachments(state.values, settings.attachment_max_bytes)


def submit_registration(state: FormState, api: RegistrationApi, settings: FormSettings) -> Tuple[bool, str]:
    """
    Submit the record from the final step.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, success message) and phase "submitted"
        - (False, INCOMPLETE_MESSAGE) if any step is invalid; the wizard
          jumps back to that step
        - (False, BUSY_MESSAGE) if a submission is already running
        - (False, SUBMIT_ERROR_MESSAGE) on any backend failure; the record is
          kept and submission can be retried

    Behavior:
        - Only one submission can be in flight
        - Attachments are encoded into a copy of the record
    """
    if not is_editable(state) or not wizard.is_final(state):
        return False, BUSY_MESSAGE

    errors = validate_record(state, settings)
    if errors:
        state.errors = errors
        invalid_step = wizard.first_invalid_step(step_validator(state, settings))
        if invalid_step is not None:
            state.step = invalid_step
            state.scroll_to_top = True
        return False, INCOMPLETE_MESSAGE

    if not wizard.begin_submit(state):
        return False, BUSY_MESSAGE
    state.submit_error = False

    try:
        payload = build_payload(state, settings)
        api.submit(state.secret if state.is_edit else None, payload)
    except (SubmissionError, AttachmentTooLargeError) as e:
        logger.error(f"Registration submission failed: {e}")
        return _submission_failed(state)
    except Exception as e:
        logger.error(f"Unexpected error during registration submission: {e}")
        return _submission_failed(state)

    wizard.finish_submit(state, success=True)
    state.submit_message = SUCCESS_MESSAGES[state.flow]
    return True, state.submit_message


def _submission_failed(state: FormState) -> Tuple[bool, str]:
    wizard.finish_submit(state, success=False)
    state.submit_error = True
    state.submit_message = SUBMIT_ERROR_MESSAGE
    return False, SUBMIT_ERROR_MESSAGE


def dismiss_submit_error(state: FormState) -> None:
    state.submit_error = False
    state.submit_message = ""
