"""
Registration wizard page.

Widgets write into the session's FormState through registration_service
callbacks; every rerun renders the current step from that state.
"""
import logging
from datetime import date
from html import escape
from typing import Any, Callable, Optional, Sequence

import streamlit as st
import streamlit.components.v1 as components

from src.models.choices import (
    GENDER_OPTIONS,
    GRADE_LABELS,
    GRADE_OPTIONS,
    TEAM_SIZE_OPTIONS,
    TSHIRT_SIZE_CHART_URL,
    TSHIRT_SIZE_OPTIONS,
)
from src.models.form_state import FormState
from src.models.registration import RegistrationRecord
from src.models.team_member import TeamMember
from src.services.attachment_service import attachment_from_upload, is_encoded
from src.services.config_service import FormSettings
from src.services.registration_service import (
    add_item,
    dismiss_submit_error,
    go_next,
    go_prev,
    is_editable,
    list_controller,
    remove_item,
    submit_registration,
    sync_team_size,
    update_field,
    wizard,
)
from src.services.remote_service import RegistrationApi
from src.utils.date_utils import parse_birthday, to_date_string
from src.utils.field_paths import get_value, join_path, split_path
from src.ui.html_utils import field_error, html_block, step_progress

logger = logging.getLogger(__name__)

FORM_STATE_KEY = "form_state"
MIN_BIRTHDAY = date(1950, 1, 1)


def widget_key(state: FormState, path: str) -> str:
    """
    Widget key for a record path.

    List indices are replaced by the item's session key, so a widget keeps
    its own value when an earlier item is removed.
    - "teamMembers.1.name" → "field:teamMembers.#7.name"
    """
    parts = split_path(path)
    segments = []
    for position, part in enumerate(parts):
        if isinstance(part, int):
            keys = state.item_keys.get(join_path(*parts[:position]), [])
            segments.append(f"#{keys[part]}" if part < len(keys) else str(part))
        else:
            segments.append(part)
    return "field:" + ".".join(segments)


def _choice_index(options: Sequence[str], value: Any) -> Optional[int]:
    """Index of value in options, None when unset or unknown."""
    try:
        return list(options).index(value)
    except ValueError:
        return None


def _form_state() -> FormState:
    return st.session_state[FORM_STATE_KEY]


def _on_widget_change(path: str, key: str, convert: Optional[Callable[[Any], Any]] = None) -> None:
    value = st.session_state.get(key)
    if convert is not None:
        value = convert(value)
    update_field(_form_state(), path, value)


def _on_upload_change(path: str, key: str) -> None:
    attachment = attachment_from_upload(st.session_state.get(key))
    update_field(_form_state(), path, attachment if attachment is not None else "")


def _show_error(state: FormState, path: str) -> None:
    message = state.errors.get(path)
    if message:
        st.markdown(field_error(message), unsafe_allow_html=True)


def _text_field(state: FormState, path: str, label: str, placeholder: str = "", area: bool = False) -> None:
    key = widget_key(state, path)
    widget = st.text_area if area else st.text_input
    widget(
        label,
        value=get_value(state.values, path, "") or "",
        placeholder=placeholder,
        key=key,
        on_change=_on_widget_change,
        args=(path, key),
        disabled=not is_editable(state),
    )
    _show_error(state, path)


def _select_field(
    state: FormState,
    path: str,
    label: str,
    options: Sequence[str],
    format_func: Callable[[str], str] = str,
) -> None:
    key = widget_key(state, path)
    st.selectbox(
        label,
        options=list(options),
        index=_choice_index(options, get_value(state.values, path)),
        format_func=format_func,
        placeholder="請選擇",
        key=key,
        on_change=_on_widget_change,
        args=(path, key, lambda value: value or ""),
        disabled=not is_editable(state),
    )
    _show_error(state, path)


def _birthday_field(state: FormState, path: str) -> None:
    key = widget_key(state, path)
    st.date_input(
        "生日",
        value=parse_birthday(get_value(state.values, path, "")),
        min_value=MIN_BIRTHDAY,
        max_value=date.today(),
        format="YYYY-MM-DD",
        key=key,
        on_change=_on_widget_change,
        args=(path, key, to_date_string),
        disabled=not is_editable(state),
    )
    _show_error(state, path)


def _attachment_field(state: FormState, path: str, label: str) -> None:
    key = widget_key(state, path)
    current = get_value(state.values, path)
    st.file_uploader(
        label,
        type=["jpg", "jpeg", "png", "pdf"],
        key=key,
        on_change=_on_upload_change,
        args=(path, key),
        disabled=not is_editable(state),
    )
    if is_encoded(current):
        st.caption("✅ 已上傳，重新選擇檔案即可更換")
    _show_error(state, path)


def _list_buttons(state: FormState, settings: FormSettings, path: str, add_label: str) -> None:
    controller = list_controller(state, settings, path)
    if st.button(
        add_label,
        key=f"add:{widget_key(state, path)}",
        disabled=not is_editable(state) or not controller.can_append(state),
    ):
        add_item(state, settings, path)
        st.rerun()
    _show_error(state, path)


def _remove_button(state: FormState, settings: FormSettings, path: str, index: int, label: str = "移除") -> None:
    controller = list_controller(state, settings, path)
    item_path = join_path(path, index)
    if st.button(
        label,
        key=f"remove:{widget_key(state, item_path)}",
        disabled=not is_editable(state) or not controller.can_remove(state),
    ):
        remove_item(state, settings, path, index)
        st.rerun()


def _render_welcome(state: FormState) -> None:
    if state.is_edit:
        st.markdown("您正在修改已送出的報名資料。請逐步確認各頁內容，最後按下送出即可更新。")
    else:
        st.markdown(html_block("""
            <p>HackIT 是專為高中職學生舉辦的黑客松。</p>
            <p>報名需要填寫團隊資訊、每位成員的基本資料與緊急聯絡人，以及陪伴人與參展人（可省略）。</p>
            <p>準備好了就按「下一步」開始填寫。</p>
        """), unsafe_allow_html=True)


def _render_team_step(state: FormState) -> None:
    _text_field(state, "teamName", "團隊名稱", placeholder="2 到 30 個字")

    if state.is_edit:
        st.text_input("參賽團隊人數", value=str(state.values.get("teamSize", "")), disabled=True,
                      key="field:teamSize:locked")
        st.caption("參賽團隊人數無法變更")
        _show_error(state, "teamSize")
        return

    key = widget_key(state, "teamSize")
    st.radio(
        "參賽團隊人數",
        options=list(TEAM_SIZE_OPTIONS),
        index=_choice_index(TEAM_SIZE_OPTIONS, state.values.get("teamSize")),
        format_func=lambda option: f"{option} 人",
        horizontal=True,
        key=key,
        on_change=_on_widget_change,
        args=("teamSize", key, lambda value: value or ""),
        disabled=not is_editable(state),
    )
    _show_error(state, "teamSize")


def _render_member(state: FormState, settings: FormSettings, index: int) -> None:
    base = join_path("teamMembers", index)
    member = TeamMember.from_dict(get_value(state.values, base))

    st.markdown(f"#### {member.role_label(index)}")
    left, right = st.columns(2, gap="small")
    with left:
        _text_field(state, join_path(base, "name"), "姓名")
        _select_field(state, join_path(base, "gender"), "性別", GENDER_OPTIONS)
        _text_field(state, join_path(base, "school"), "學校")
        _select_field(state, join_path(base, "grade"), "年級", GRADE_OPTIONS,
                      format_func=lambda value: GRADE_LABELS.get(value, value))
        _text_field(state, join_path(base, "identityNumber"), "身份字號", placeholder="A123456789")
    with right:
        _birthday_field(state, join_path(base, "birthday"))
        _text_field(state, join_path(base, "email"), "Email", placeholder="name@example.com")
        _text_field(state, join_path(base, "phone"), "手機號碼", placeholder=f"{settings.mobile_prefix}xxxxxxxx")
        _select_field(state, join_path(base, "tShirtSize"), "T-shirt 尺碼", TSHIRT_SIZE_OPTIONS)
        st.caption(f"[尺碼表]({TSHIRT_SIZE_CHART_URL})")

    _text_field(state, join_path(base, "allergies"), "過敏食物（選填）")
    _text_field(state, join_path(base, "specialDiseases"), "特殊疾病（選填）")
    _text_field(state, join_path(base, "remarks"), "備註（選填）", area=True)

    if state.with_attachments:
        front, back = st.columns(2, gap="small")
        with front:
            _attachment_field(state, join_path(base, "idCardFront"), "證件正面")
        with back:
            _attachment_field(state, join_path(base, "idCardBack"), "證件反面")

    contacts_path = join_path(base, "emergencyContacts")
    st.markdown("##### 緊急聯絡人")
    contacts = list_controller(state, settings, contacts_path).items(state)
    for contact_index in range(len(contacts)):
        contact_base = join_path(contacts_path, contact_index)
        cols = st.columns([3, 2, 3, 1], gap="small")
        with cols[0]:
            _text_field(state, join_path(contact_base, "name"), "姓名")
        with cols[1]:
            _text_field(state, join_path(contact_base, "relationship"), "關係")
        with cols[2]:
            _text_field(state, join_path(contact_base, "phone"), "電話號碼")
        with cols[3]:
            _remove_button(state, settings, contacts_path, contact_index)
    _list_buttons(state, settings, contacts_path, "➕ 新增緊急聯絡人")


def _render_members_step(state: FormState, settings: FormSettings) -> None:
    sync_team_size(state)
    controller = list_controller(state, settings, "teamMembers")
    members = controller.items(state)
    try:
        team_size = int(state.values.get("teamSize") or 0)
    except ValueError:
        team_size = 0

    for index in range(len(members)):
        with st.container(border=True):
            _render_member(state, settings, index)
            if not state.is_edit and index > 0 and len(members) > team_size:
                _remove_button(state, settings, "teamMembers", index, label="移除此成員")
    _show_error(state, "teamMembers")


def _render_people_step(
    state: FormState,
    settings: FormSettings,
    path: str,
    add_label: str,
    with_phone: bool,
) -> None:
    items = list_controller(state, settings, path).items(state)
    if not items:
        st.caption("目前沒有資料，可直接按「下一步」略過。")
    for index in range(len(items)):
        item_base = join_path(path, index)
        with st.container(border=True):
            cols = st.columns([3, 4, 3, 1] if with_phone else [3, 4, 1], gap="small")
            with cols[0]:
                _text_field(state, join_path(item_base, "name"), "姓名")
            with cols[1]:
                _text_field(state, join_path(item_base, "email"), "Email")
            if with_phone:
                with cols[2]:
                    _text_field(state, join_path(item_base, "phone"), "電話號碼")
            with cols[-1]:
                _remove_button(state, settings, path, index)
    _list_buttons(state, settings, path, add_label)


def _render_submit_step(state: FormState, settings: FormSettings, api: RegistrationApi) -> None:
    record = RegistrationRecord.from_dict(state.values)
    st.markdown(html_block(f"""
        <ul>
            <li>團隊名稱：{escape(record.team_name)}</li>
            <li>參賽人數：{record.member_count()}</li>
            <li>陪伴人：{len(record.accompanying_persons)}</li>
            <li>參展人：{len(record.exhibitors)}</li>
        </ul>
    """), unsafe_allow_html=True)

    if state.submit_error:
        st.error(f"❌ {state.submit_message}")
        if st.button("關閉", key="dismiss_submit_error"):
            dismiss_submit_error(state)
            st.rerun()
    elif state.errors:
        st.warning("表單尚有未完成的欄位，請修正後再送出")

    if st.button("送出表單", type="primary", width='stretch', key="submit_form",
                 disabled=not is_editable(state)):
        with st.spinner("送出中，請稍候..."):
            success, message = submit_registration(state, api, settings)
        if success:
            logger.info(f"Registration submitted ({state.flow})")
        else:
            logger.debug(f"Submission not completed: {message}")
        st.rerun()


def _render_navigation(state: FormState, settings: FormSettings) -> None:
    prev_col, next_col = st.columns(2, gap="small")
    with prev_col:
        if state.step > 1 and st.button("上一步", width='stretch', key="nav_prev",
                                         disabled=not wizard.can_navigate(state)):
            go_prev(state)
            st.rerun()
    with next_col:
        if not wizard.is_final(state) and st.button("下一步", type="primary", width='stretch', key="nav_next",
                                                     disabled=not wizard.can_navigate(state)):
            go_next(state, settings)
            st.rerun()


def _scroll_to_top() -> None:
    components.html(
        """
        <script>
        const main = parent.document.querySelector('section.main') || parent.document.documentElement;
        main.scrollTo({ top: 0, behavior: 'smooth' });
        </script>
        """,
        height=0,
    )


def render_registration_form(state: FormState, settings: FormSettings, api: RegistrationApi) -> None:
    """
    Render the current wizard step for a ready form session.

    Args:
        state: Session form state (phase "ready" or "submitting")
        settings: Form settings
        api: Backend client used on the final step
    """
    step = wizard.current(state)

    if state.scroll_to_top:
        _scroll_to_top()
        state.scroll_to_top = False

    st.markdown(step_progress([s.title for s in wizard.steps], state.step), unsafe_allow_html=True)
    st.markdown(f"### {step.title}")

    if step.key == "welcome":
        _render_welcome(state)
    elif step.key == "team":
        _render_team_step(state)
    elif step.key == "members":
        _render_members_step(state, settings)
    elif step.key == "companions":
        _render_people_step(state, settings, "accompanyingPersons", "➕ 新增陪伴人", with_phone=True)
    elif step.key == "exhibitors":
        _render_people_step(state, settings, "exhibitors", "➕ 新增參展人", with_phone=False)
    elif step.key == "submit":
        _render_submit_step(state, settings, api)

    _render_navigation(state, settings)
