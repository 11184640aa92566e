"""Full-page states around the wizard: loading, not found, finished."""
import streamlit as st

from src.models.form_state import FormState
from src.ui.html_utils import notice_card

NOT_FOUND_TITLE = "無效的請求"
VERIFICATION_SUCCESS_TITLE = "感謝您已經完成驗證！"


def render_loading_page() -> None:
    st.markdown(notice_card("讀取中", "正在載入您的報名資料，請稍候..."), unsafe_allow_html=True)


def render_not_found_page(message: str) -> None:
    """Terminal page for an edit link that couldn't be resolved."""
    st.markdown(notice_card(NOT_FOUND_TITLE, message, tone="error"), unsafe_allow_html=True)


def render_submitted_page(state: FormState) -> None:
    """Terminal page after a successful submission."""
    st.markdown(notice_card("送出成功", state.submit_message, tone="success"), unsafe_allow_html=True)
    st.balloons()


def render_verification_success_page() -> None:
    st.markdown(
        notice_card(VERIFICATION_SUCCESS_TITLE, "您的電子郵件已通過驗證，可以關閉此頁面。", tone="success"),
        unsafe_allow_html=True,
    )
