# Role: Streamlit rendition of the floating chat widget.
# - The ChatWidget (and its ConversationStore) lives in st.session_state for one browser session.
# - Every render draws a ChatView built from the store snapshot; nothing else is read from the store.

from __future__ import annotations

from typing import Optional

import streamlit as st
import streamlit.components.v1 as components

import backend.config
backend.config.load_env()

from backend.core.chat_view import ChatView, ScrollTracker
from backend.core.conversation_store import ConversationStore, PendingTurn
from backend.core.widget import ChatWidget
from backend.utils.logging import setup_logging

setup_logging(backend.config.settings().log_level)


# ----------------------------
# Session helpers
# ----------------------------
def ensure_session() -> None:
    if "widget" not in st.session_state:
        st.session_state["widget"] = ChatWidget()
    if "scroll" not in st.session_state:
        st.session_state["scroll"] = ScrollTracker()
    if "in_flight" not in st.session_state:
        st.session_state["in_flight"] = None


# ----------------------------
# Callbacks (run before the next render)
# ----------------------------
def _on_draft_change(store: ConversationStore) -> None:
    store.set_draft(st.session_state.get("draft", ""))


def _on_send(store: ConversationStore) -> None:
    turn = store.begin_turn(st.session_state.get("draft", ""))
    if turn is not None:
        st.session_state["in_flight"] = turn


def _on_toggle(widget: ChatWidget) -> None:
    widget.toggle()


def _on_new_chat(widget: ChatWidget) -> None:
    # Drops the conversation and closes its event loop; the next open starts from the greeting.
    widget.reset()
    widget.open()
    st.session_state["scroll"] = ScrollTracker()
    st.session_state["in_flight"] = None


# ----------------------------
# UI polish
# ----------------------------
def inject_css() -> None:
    st.markdown(
        """
<style>
.block-container { max-width: 720px; padding-top: 2rem; padding-bottom: 2rem; }

/* Visitor bubbles on the right, assistant on the left */
div[data-testid="stChatMessage"]:has(div[data-testid="stChatMessageAvatarUser"]) {
  flex-direction: row-reverse;
  text-align: right;
}

.stButton>button {
  border-radius: 12px !important;
  font-weight: 650 !important;
}
</style>
""",
        unsafe_allow_html=True,
    )


def scroll_to_latest() -> None:
    components.html(
        """
<script>
const msgs = window.parent.document.querySelectorAll('[data-testid="stChatMessage"]');
if (msgs.length) { msgs[msgs.length - 1].scrollIntoView({behavior: "smooth", block: "end"}); }
</script>
""",
        height=0,
    )


# ----------------------------
# Rendering
# ----------------------------
def render_sidebar(widget: ChatWidget) -> None:
    st.sidebar.title("Agri-Assistant")
    st.sidebar.caption("Powered by Gemini AI")
    label = "✖ Close assistant" if widget.is_open else "💬 Ask the assistant"
    st.sidebar.button(label, use_container_width=True, on_click=_on_toggle, args=(widget,))
    st.sidebar.button(
        "📝 New chat",
        use_container_width=True,
        disabled=st.session_state["in_flight"] is not None,
        on_click=_on_new_chat,
        args=(widget,),
    )


def render_chat(view: ChatView) -> None:
    for bubble in view.bubbles:
        with st.chat_message(bubble.role):
            st.write(bubble.text)

    if view.show_loading:
        with st.chat_message("assistant"):
            st.markdown("_Thinking…_")

    if view.scroll_to is not None:
        scroll_to_latest()


def render_input(store: ConversationStore, view: ChatView) -> None:
    # Widget value mirrors the store draft (cleared on commit).
    st.session_state["draft"] = view.input_value
    col1, col2 = st.columns([5, 1])
    with col1:
        st.text_input(
            "Message",
            key="draft",
            placeholder=view.placeholder,
            disabled=view.input_disabled,
            on_change=_on_draft_change,
            args=(store,),
            label_visibility="collapsed",
        )
    with col2:
        st.button(
            "Send",
            use_container_width=True,
            disabled=view.submit_disabled,
            on_click=_on_send,
            args=(store,),
        )


def settle_in_flight(widget: ChatWidget, store: ConversationStore) -> None:
    turn: Optional[PendingTurn] = st.session_state["in_flight"]
    if turn is None:
        return
    try:
        widget.run(store.complete_turn(turn))
    finally:
        # Interrupted mid-wait (stop, rerun): settle with the fallback rather than stay pending.
        store.abandon_turn(turn)
        st.session_state["in_flight"] = None
    st.rerun()


# ----------------------------
# Main
# ----------------------------
def main() -> None:
    st.set_page_config(page_title="MOKSH Agri-Assistant", page_icon="💧")
    inject_css()
    ensure_session()

    st.title("💧 MOKSH Solid Water")
    st.caption("Ask our Agri-Assistant how to save water on your farm or garden.")

    widget: ChatWidget = st.session_state["widget"]
    render_sidebar(widget)

    if not widget.is_open:
        st.info("Open the assistant from the sidebar to start chatting.")
        return

    store = widget.open()
    view = st.session_state["scroll"].render(store.snapshot())
    render_chat(view)
    render_input(store, view)

    # The loading bubble is on screen now; wait for the reply, then redraw.
    settle_in_flight(widget, store)


if __name__ == "__main__":
    main()
