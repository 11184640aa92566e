"""HTML snippets rendered through st.markdown(unsafe_allow_html=True)."""
from html import escape
from textwrap import dedent
from typing import Sequence


def html_block(template: str) -> str:
    """
    Flatten multi-line HTML for st.markdown.

    Lines indented by 4+ spaces would otherwise become Markdown code blocks,
    so every line is dedented and left-stripped.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def field_error(message: str) -> str:
    """Inline error shown under a form field."""
    return html_block(f"""
        <div class="field-error" role="alert">
            {escape(message)}
        </div>
    """)


def step_progress(titles: Sequence[str], current: int) -> str:
    """
    Progress bar for the wizard.

    Args:
        titles: Step titles in order
        current: 1-based current step

    Returns:
        HTML with one segment per step; segments up to ``current`` are active
    """
    total = len(titles)
    current = min(max(current, 1), total) if total else 0
    segments = "".join(
        f'<span class="step-segment{" active" if position <= current else ""}" '
        f'title="{escape(title)}"></span>'
        for position, title in enumerate(titles, start=1)
    )
    return html_block(f"""
        <div class="step-progress">
            <div class="step-segments">{segments}</div>
            <div class="step-caption">步驟 {current} / {total}</div>
        </div>
    """)


def notice_card(title: str, body: str, tone: str = "info") -> str:
    """Centered card for full-page states (loading, not found, finished)."""
    return html_block(f"""
        <div class="notice-card notice-{escape(tone)}">
            <h2>{escape(title)}</h2>
            <p>{escape(body)}</p>
        </div>
    """)
