"""
HackIT 團隊報名系統主應用程式
HackIT Team Registration
"""
import logging
import streamlit as st

from src.models.form_state import PHASE_LOADING, PHASE_NOT_FOUND, PHASE_SUBMITTED
from src.services.config_service import get_settings
from src.services.registration_service import (
    NOT_FOUND_MESSAGE,
    load_for_edit,
    start_create_flow,
    start_edit_flow,
)
from src.services.remote_service import RegistrationApi
from src.ui.registration_form import FORM_STATE_KEY, render_registration_form
from src.ui.status_pages import (
    render_loading_page,
    render_not_found_page,
    render_submitted_page,
    render_verification_success_page,
)

logger = logging.getLogger(__name__)

PAGE_FORM = "form"
PAGE_VERIFICATION_SUCCESS = "verification-success"


# Streamlit 頁面配置
st.set_page_config(
    page_title="HackIT 團隊報名",
    page_icon="🧑‍💻",
    layout="centered",
    initial_sidebar_state="collapsed"
)


def initialize_session_state():
    """初始化 session state，依網址參數決定頁面與報名流程。"""
    if "current_page" in st.session_state:
        return

    query_params = st.query_params
    if query_params.get("page") == PAGE_VERIFICATION_SUCCESS:
        st.session_state.current_page = PAGE_VERIFICATION_SUCCESS
        return

    settings = get_settings()
    secret = query_params.get("secret")
    if secret:
        st.session_state[FORM_STATE_KEY] = start_edit_flow(secret, settings)
    else:
        st.session_state[FORM_STATE_KEY] = start_create_flow()
    st.session_state.current_page = PAGE_FORM


def apply_custom_css():
    """套用自訂 CSS 樣式。"""
    st.markdown("""
        <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            border: none;
        }

        .field-error {
            color: #ef4444;
            font-size: 0.85rem;
            margin: -0.5rem 0 0.75rem;
        }

        .step-segments {
            display: flex;
            gap: 4px;
        }

        .step-segment {
            flex: 1;
            height: 6px;
            border-radius: 3px;
            background: #2d3748;
        }

        .step-segment.active {
            background: #667eea;
        }

        .step-caption {
            font-size: 0.8rem;
            color: #94a3b8;
            margin: 4px 0 12px;
        }

        .notice-card {
            text-align: center;
            padding: 48px 24px;
            border-radius: 16px;
            background: #16213e;
            color: #f1f5f9;
        }

        .notice-error h2 {
            color: #ef4444;
        }

        .notice-success h2 {
            color: #10b981;
        }
        </style>
    """, unsafe_allow_html=True)


def render_form_page():
    """依表單階段渲染讀取中、找不到、完成或精靈步驟。"""
    settings = get_settings()
    api = RegistrationApi(settings.api_end_point, timeout=settings.request_timeout)
    state = st.session_state[FORM_STATE_KEY]

    if state.phase == PHASE_LOADING:
        render_loading_page()
        with st.spinner("讀取中..."):
            load_for_edit(state, api)
        st.rerun()

    if state.phase == PHASE_NOT_FOUND:
        render_not_found_page(NOT_FOUND_MESSAGE)
        return

    if state.phase == PHASE_SUBMITTED:
        render_submitted_page(state)
        return

    render_registration_form(state, settings, api)


def render_current_page():
    """根據當前頁面狀態渲染對應內容。"""
    try:
        if st.session_state.current_page == PAGE_VERIFICATION_SUCCESS:
            render_verification_success_page()
        elif st.session_state.current_page == PAGE_FORM:
            render_form_page()
        else:
            st.error(f"未知的頁面：{st.session_state.current_page}")

    except Exception as e:
        # 錯誤邊界
        logger.exception("Unhandled exception while rendering page")
        st.error("發生錯誤，請稍後再試")

        with st.expander("🔍 錯誤詳情"):
            st.code(str(e))


def main():
    """主應用程式入口。"""
    try:
        initialize_session_state()
        apply_custom_css()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("應用程式發生錯誤，請重新整理頁面")
        st.code(str(e))

        if st.button("🔄 重新整理"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
