"""Streamlit web application for bible talk generation."""

import base64

import streamlit as st

from bibletalk.ui.api_client import GatewayClient
from bibletalk.ui.controller import DiscussionController
from bibletalk.ui.state import AppState
from bibletalk.ui.utils import DISCUSSION_SECTIONS, create_download_markdown

# Page configuration
st.set_page_config(
    page_title="BibleTalkGPT",
    page_icon="✨",
    layout="centered",
)


def init_session_state():
    """Initialize session state variables."""
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState()
    if "controller" not in st.session_state:
        st.session_state.controller = DiscussionController(
            GatewayClient(), st.session_state.app_state
        )


def render_sidebar(controller: DiscussionController):
    """Render sidebar with fine tuning controls."""
    state: AppState = controller.state
    with st.sidebar:
        st.title("⚙️ Settings")

        st.subheader("Model")
        st.caption(state.active_model or "No model selected")

        if state.tuning.is_active:
            st.info(f"🔄 {state.tuning.message or state.tuning.phase.value}")
            if st.button("Cancel fine tuning"):
                controller.cancel_fine_tuning()
            if st.button("Refresh status"):
                st.rerun()
        elif st.button("Fine tune with local data"):
            controller.start_fine_tuning()
            st.rerun()

        st.subheader("Gateway")
        if controller.api_client.health_check():
            st.success("✅ Gateway OK")
        else:
            st.error("❌ Gateway unreachable")

        st.divider()
        st.caption("BibleTalkGPT v0.1.0")


def render_input_section(controller: DiscussionController):
    """Render hint input section."""
    state: AppState = controller.state

    state.hint = st.text_area(
        "Hint",
        value=state.hint,
        height=120,
        placeholder="Drop hints on what kind of bible talk you would like to teach",
    )

    if st.button("✨ Generate", type="primary", disabled=not state.can_generate):
        with st.spinner("Preparing your discussion..."):
            controller.generate_discussion()

    if state.error_message:
        st.error(f"Malicious hint: {state.error_message}")


def render_flyer_section(controller: DiscussionController):
    """Render the flyer and its extra prompt input."""
    state: AppState = controller.state

    if state.is_flyer_loading:
        st.caption("Generating flyer...")
    elif state.flyer_image:
        flyer = base64.b64decode(state.flyer_image)
        st.image(flyer, caption="Flyer for bible discussion")
        st.download_button(
            label="📥 Download flyer",
            data=flyer,
            file_name="flyer.png",
            mime="image/png",
        )

    extra_prompt = st.text_input(
        "Extra flyer instructions",
        value=state.extra_flyer_prompt,
    )
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Apply instructions"):
            with st.spinner("Regenerating flyer..."):
                controller.update_flyer_prompt(extra_prompt)
    with col2:
        if st.button("Reload flyer"):
            with st.spinner("Regenerating flyer..."):
                controller.refresh_flyer()


def render_output_section(controller: DiscussionController):
    """Render the generated discussion."""
    discussion = controller.state.discussion
    if discussion is None:
        return

    st.header("Bible discussion for today!")
    render_flyer_section(controller)

    st.subheader(discussion.bible_talk_topic)
    st.markdown(discussion.introductory_statement)

    for field, label in DISCUSSION_SECTIONS:
        st.markdown(f"**{label}**")
        st.markdown(getattr(discussion, field))

    st.download_button(
        label="📥 Download as markdown",
        data=create_download_markdown(discussion),
        file_name="bible_talk.md",
        mime="text/markdown",
    )


def main():
    """Main application entry point."""
    init_session_state()
    controller: DiscussionController = st.session_state.controller

    st.title("BibleTalkGPT")

    render_sidebar(controller)
    render_input_section(controller)
    render_output_section(controller)


if __name__ == "__main__":
    main()
