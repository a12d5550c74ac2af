"""Streamlit UI helpers for the playground log, realtime feed and side panels.

The formatting functions are plain and testable; the render_* functions take
the streamlit module as a parameter so tests can pass a MagicMock.
"""

from __future__ import annotations

from typing import Any, Iterable

import streamlit as st

from appwrite_playground.domains.playground.action_log import LogEntry, Severity
from appwrite_playground.domains.playground.registry import ActionRegistry

SEVERITY_COLOURS = {
    Severity.INFO: "#1f2937",
    Severity.WARNING: "#b45309",
    Severity.ERROR: "#b91c1c",
}

BUTTON_COLUMNS = 3


def format_entry(entry: LogEntry) -> str:
    """`[HH:MM:SS] text`, with multi-line results indented under the timestamp."""
    stamp = entry.timestamp.strftime("%H:%M:%S")
    first, *rest = (entry.text or "").split("\n")
    lines = [f"[{stamp}] {first}"]
    lines.extend(f"           {line}" for line in rest)
    return "\n".join(lines)


def colour_for(severity: Severity | str) -> str:
    return SEVERITY_COLOURS.get(Severity(severity), SEVERITY_COLOURS[Severity.INFO])


def button_rows(labels: list[str], columns: int = BUTTON_COLUMNS) -> list[list[str]]:
    return [labels[i : i + columns] for i in range(0, len(labels), columns)]


def render_sections(registry: ActionRegistry, on_click, st=st) -> None:
    """One expander per section, buttons laid out in a grid."""
    for section, actions in registry.sections().items():
        with st.expander(section or "Other", expanded=False):
            for row in button_rows([a.label for a in actions]):
                cols = st.columns(BUTTON_COLUMNS)
                for col, label in zip(cols, row):
                    col.button(
                        label,
                        key=f"action::{label}",
                        on_click=on_click,
                        args=(label,),
                        use_container_width=True,
                    )


def render_log(entries: Iterable[LogEntry], st=st) -> None:
    """Newest first. Errors and warnings get their own colour."""
    entries = list(entries)
    if not entries:
        st.caption("No output yet.")
        return
    for entry in entries:
        text = format_entry(entry).replace("\n", "  \n")
        if entry.severity is Severity.INFO:
            st.markdown(text)
        else:
            st.markdown(
                f"<span style='color:{colour_for(entry.severity)}'>{text}</span>",
                unsafe_allow_html=True,
            )


def render_realtime_feed(entries: Iterable[LogEntry], st=st) -> None:
    entries = list(entries)
    st.markdown("#### 🔄 Realtime events")
    if not entries:
        st.caption("No realtime events yet.")
        return
    for entry in entries:
        st.text(format_entry(entry))


def render_documents(documents: list[dict[str, Any]], st=st) -> None:
    st.markdown("#### 💾 Documents")
    if not documents:
        st.caption("Use 'List Documents' to load documents.")
        return
    for doc in documents:
        title = doc.get("Title") or "(untitled)"
        st.markdown(f"- `{doc.get('$id')}` {title}")


def render_files(files: list[dict[str, Any]], st=st) -> None:
    st.markdown("#### 📁 Files")
    if not files:
        st.caption("Use 'List Files' to load files.")
        return
    for f in files:
        st.markdown(f"- {f.get('name')} ({f.get('sizeOriginal')} bytes)")
