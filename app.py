"""
Appwrite Playground: Streamlit UI entry point.
"""

import logging

import streamlit as st

# Load .env first so the Appwrite endpoint/project are picked up
from appwrite_playground.utils.config import load_config, load_playground_config
load_config()

from appwrite_playground.orchestration.playground import Playground
from appwrite_playground.ui.playground_display import (
    render_documents,
    render_files,
    render_log,
    render_realtime_feed,
    render_sections,
)
from appwrite_playground.utils.logger import get_logger, quiet_http_loggers, setup_logger

setup_logger(level=logging.INFO)
quiet_http_loggers()
log = get_logger()

REFRESH_SECONDS = 1.0

st.set_page_config(page_title="Appwrite Playground", layout="wide")
st.title("Appwrite Playground")


# One runtime per server process; it owns the event loop thread and the
# session cookies, so it must survive script reruns.
@st.cache_resource
def get_playground() -> Playground:
    playground = Playground(load_playground_config())
    playground.start()
    log.info("Playground runtime started")
    return playground


playground = get_playground()


def _trigger(label: str) -> None:
    playground.trigger(label)


with st.sidebar:
    st.header("Inputs")
    playground.inputs.email = st.text_input("Email", value=playground.inputs.email)
    playground.inputs.password = st.text_input("Password", value=playground.inputs.password, type="password")
    playground.inputs.name = st.text_input("Name", value=playground.inputs.name)

    st.divider()
    st.caption(f"Endpoint: `{playground.config.endpoint or 'not set'}`")
    st.caption(f"Project: `{playground.config.project_id or 'not set'}`")
    if playground.state.last_oauth_url:
        st.markdown(f"[Open last OAuth URL]({playground.state.last_oauth_url})")
    with st.expander("In-flight actions"):
        running = playground.dispatcher.in_flight()
        st.caption(", ".join(running) if running else "Single-flight off or nothing running.")


left, right = st.columns([3, 2])

with left:
    render_sections(playground.registry, on_click=_trigger)


@st.fragment(run_every=REFRESH_SECONDS)
def live_output() -> None:
    st.info(f"Status: {playground.status}")
    output, realtime, data = st.tabs(["Output", "Realtime", "Data"])
    with output:
        render_log(playground.log.latest_first())
    with realtime:
        render_realtime_feed(playground.feed.latest_first())
    with data:
        render_documents(playground.state.documents)
        render_files(playground.state.files)


with right:
    live_output()
