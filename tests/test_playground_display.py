"""
Tests for playground_display: entry formatting and render helpers with a mocked streamlit.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

from appwrite_playground.domains.playground.action_log import LogEntry, Severity
from appwrite_playground.domains.playground.registry import ActionRegistry
from appwrite_playground.ui.playground_display import (
    BUTTON_COLUMNS,
    button_rows,
    colour_for,
    format_entry,
    render_documents,
    render_log,
    render_sections,
)

AT = datetime(2025, 8, 1, 9, 5, 7)


def test_format_entry_single_line() -> None:
    """Single-line entries get the clock prefix."""
    entry = LogEntry(Severity.INFO, "✅ Ping successful: Pong!", timestamp=AT)
    assert format_entry(entry) == "[09:05:07] ✅ Ping successful: Pong!"


def test_format_entry_indents_continuation_lines() -> None:
    """Continuation lines are indented under the timestamp."""
    entry = LogEntry(Severity.INFO, "✅ Found 2 files\n  File: a.txt", timestamp=AT)
    first, second = format_entry(entry).split("\n")
    assert first == "[09:05:07] ✅ Found 2 files"
    assert second.strip() == "File: a.txt"
    assert second.startswith(" " * 11)


def test_colours_differ_by_severity() -> None:
    """Errors and warnings are coloured apart from info; names are accepted too."""
    assert colour_for("error") != colour_for(Severity.INFO)
    assert colour_for(Severity.WARNING) != colour_for(Severity.ERROR)


def test_button_rows_split() -> None:
    """Labels are laid out in rows of BUTTON_COLUMNS."""
    rows = button_rows([str(i) for i in range(7)])
    assert [len(r) for r in rows] == [BUTTON_COLUMNS, BUTTON_COLUMNS, 1]


def test_render_log_colours_errors_only() -> None:
    """Info entries are plain markdown; errors use HTML colour."""
    st = MagicMock()
    render_log([
        LogEntry(Severity.ERROR, "UnknownAction: Login", timestamp=AT),
        LogEntry(Severity.INFO, "ok", timestamp=AT),
    ], st=st)

    calls = st.markdown.call_args_list
    assert "UnknownAction: Login" in calls[0].args[0]
    assert calls[0].kwargs == {"unsafe_allow_html": True}
    assert calls[1].args == ("[09:05:07] ok",)


def test_render_log_empty() -> None:
    """An empty log shows a caption."""
    st = MagicMock()
    render_log([], st=st)
    st.caption.assert_called_once()
    st.markdown.assert_not_called()


def test_render_sections_buttons_trigger_labels() -> None:
    """Each action gets one button wired to the click handler with its label."""
    async def op() -> None:
        return None

    registry = ActionRegistry()
    for label in ("Login", "Logout"):
        registry.register(label, op, section="auth")
    st = MagicMock()
    col = MagicMock()
    st.columns.return_value = [col, MagicMock(), MagicMock()]
    on_click = MagicMock()

    render_sections(registry, on_click, st=st)

    st.expander.assert_called_once_with("auth", expanded=False)
    clicked = [c.kwargs["args"] for c in st.columns.return_value[0].button.call_args_list]
    assert clicked == [("Login",)]
    assert st.columns.return_value[1].button.call_args.kwargs["args"] == ("Logout",)


def test_render_documents_lists_ids() -> None:
    """Loaded documents are listed by id and title."""
    st = MagicMock()
    render_documents([{"$id": "d1", "Title": "Test Document"}], st=st)
    assert st.markdown.call_args_list[-1].args[0] == "- `d1` Test Document"
