"""
SpeechCoach Streamlit UI.

Run with: ``streamlit run speechcoach/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``speechcoach.*`` imports work from a
# checkout. Streamlit replaces sys.path[0] with the script directory.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import asyncio  # noqa: E402

import streamlit as st  # noqa: E402

from speechcoach.core.config import get_settings  # noqa: E402
from speechcoach.core.models import AnalysisResult  # noqa: E402
from speechcoach.ui.api_client import APIClient  # noqa: E402
from speechcoach.ui.controller import SessionController  # noqa: E402
from speechcoach.ui.recorder import Recorder  # noqa: E402

st.set_page_config(
    page_title="SpeechCoach",
    page_icon="\U0001f3a4",
    layout="centered",
)


@st.cache_resource
def get_api_client(base_url: str) -> APIClient:
    """Return a cached APIClient, keyed by base_url."""
    return APIClient(base_url=base_url)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
if "controller" not in st.session_state:
    st.session_state.notices = []
    st.session_state.controller = SessionController(
        recorder=Recorder(),
        client=get_api_client(get_settings().api_base_url),
        notify=st.session_state.notices.append,
    )

controller: SessionController = st.session_state.controller

for message in st.session_state.notices:
    st.toast(message, icon="⚠️")
st.session_state.notices.clear()


def _render_list(title: str, items: list[str]) -> None:
    if not items:
        return
    st.markdown(f"**{title}**")
    for item in items:
        st.markdown(f"- {item}")


def _render_result(result: AnalysisResult) -> None:
    overall = result.overall_effectiveness
    st.metric("Overall effectiveness", f"{overall.score}/100")

    with st.expander("Transcription", expanded=True):
        st.write(result.transcription or "_No speech detected._")

    with st.container(border=True):
        st.subheader("Content")
        col1, col2 = st.columns(2)
        col1.metric("Depth", result.content.depth)
        col2.metric("Relevance", result.content.relevance)
        _render_list("Key points", result.content.key_points)
        _render_list("Suggestions", result.content.suggestions)

    for label, section in (
        ("Structure", result.structure),
        ("Tone", result.tone),
        ("Language", result.language),
    ):
        with st.container(border=True):
            st.subheader(f"{label}: {section.score}")
            st.write(section.feedback)
    _render_list("Notable expressions", result.language.notable_expressions)

    with st.container(border=True):
        st.subheader(f"Pronunciation: {result.pronunciation.score}")
        _render_list("Issues", result.pronunciation.issues)

    with st.container(border=True):
        st.subheader(f"Grammar: {result.grammar.score}")
        _render_list("Errors", result.grammar.errors)

    _render_list("Strengths", overall.strengths)
    _render_list("Areas for improvement", overall.areas_for_improvement)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f3a4 SpeechCoach")
    _conn_ok, _conn_msg = get_api_client(get_settings().api_base_url).check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

state = controller.state

st.title("\U0001f3a4 SpeechCoach")
st.caption("Speak on the topic, then get feedback on your answer.")
st.info(f"**Topic:** {state.topic}")

if state.is_recording:
    st.markdown(":red[Recording...]")
    if st.button("Stop recording", type="primary", use_container_width=True):
        with st.spinner("Analyzing your speech..."):
            asyncio.run(controller.stop_recording())
        st.rerun()
else:
    if st.button("Start recording", type="primary", use_container_width=True):
        controller.start_recording()
        st.rerun()

state = controller.state

if state.artifact is not None and not state.artifact.is_empty:
    st.audio(state.artifact.data, format=state.artifact.content_type)

if state.is_analyzing:
    st.info("Analyzing your speech...")
elif state.result is not None:
    _render_result(state.result)
elif state.error:
    st.error(state.error)

if state.history:
    st.divider()
    st.subheader("Previous scores")
    st.line_chart(list(state.history))
    st.caption(" → ".join(str(score) for score in state.history))
