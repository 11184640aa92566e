"""Tests for registration form UI helpers."""
import pytest
from src.models.form_state import FormState
from src.services.list_service import exhibitors_list, team_members_list
from src.ui.html_utils import field_error, html_block, notice_card, step_progress
from src.ui.registration_form import _choice_index, widget_key


@pytest.fixture
def state():
    """State with two members and two exhibitors."""
    state = FormState()
    team_members_list().resize(state, 2)
    exhibitors_list().resize(state, 2)
    return state


class TestWidgetKey:
    """Tests for stable widget keys."""

    def test_top_level_path(self, state):
        """Plain fields keep their name."""
        assert widget_key(state, "teamName") == "field:teamName"

    def test_index_replaced_by_item_key(self, state):
        """List indices use the item's session key."""
        member_key = state.item_keys["teamMembers"][1]
        assert widget_key(state, "teamMembers.1.name") == f"field:teamMembers.#{member_key}.name"

    def test_nested_contact(self, state):
        """Both levels of nesting are keyed."""
        member_key = state.item_keys["teamMembers"][0]
        contact_key = state.item_keys["teamMembers.0.emergencyContacts"][0]
        assert widget_key(state, "teamMembers.0.emergencyContacts.0.phone") == (
            f"field:teamMembers.#{member_key}.emergencyContacts.#{contact_key}.phone"
        )

    def test_key_survives_removal_of_earlier_item(self, state):
        """The second exhibitor keeps its widget key after the first is removed."""
        before = widget_key(state, "exhibitors.1.name")
        exhibitors_list().remove(state, 0)
        assert widget_key(state, "exhibitors.0.name") == before

    def test_unknown_index_falls_back_to_position(self, state):
        """Untracked items use the raw index."""
        assert widget_key(state, "accompanyingPersons.0.name") == "field:accompanyingPersons.0.name"


class TestChoiceIndex:
    """Tests for preselecting options."""

    def test_known_value(self):
        """Known values map to their position."""
        assert _choice_index(("S", "M", "L"), "M") == 1

    def test_unset_value(self):
        """Empty or unknown values select nothing."""
        assert _choice_index(("S", "M", "L"), "") is None
        assert _choice_index(("S", "M", "L"), None) is None


class TestHtmlHelpers:
    """Tests for HTML snippets."""

    def test_html_block_strips_indentation(self):
        """No line keeps leading spaces."""
        html = html_block("""
            <div>
                <p>x</p>
            </div>
        """)
        assert all(not line.startswith(" ") for line in html.splitlines())

    def test_field_error_escapes_message(self):
        """Messages are HTML-escaped."""
        html = field_error("<b>Email 必填</b>")
        assert "&lt;b&gt;" in html
        assert 'class="field-error"' in html

    def test_step_progress_marks_active_steps(self):
        """Segments up to the current step are active."""
        html = step_progress(["a", "b", "c"], 2)
        assert html.count("step-segment active") == 2
        assert "步驟 2 / 3" in html

    def test_step_progress_clamps(self):
        """Out-of-range steps are clamped."""
        assert "步驟 3 / 3" in step_progress(["a", "b", "c"], 9)

    def test_notice_card_tone(self):
        """Tone becomes a CSS class."""
        html = notice_card("無效的請求", "找不到", tone="error")
        assert "notice-error" in html
        assert "無效的請求" in html
