# Role: Streamlit chat UI (presentation adapter).
# - ChatSession is authoritative (conversation, loading/typing flags, error, prompt carousel).
# - This module only renders that state and forwards user actions.

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

import streamlit as st

import agent_chat.config as config
config.load_env()

from agent_chat.core.chat_session import ChatSession
from agent_chat.core.identity import StorageIdentityProvider
from agent_chat.core.storage import JsonFileStorage, MemoryStorage
from agent_chat.models.message import Message

_SESSION_KEY = "chat_session"
_TICK_KEY = "prompt_tick_at"


# ----------------------------
# Session helpers
# ----------------------------
def ensure_session() -> ChatSession:
    if _SESSION_KEY not in st.session_state:
        settings = config.get_settings()
        # Key line: st.session_state is the session-scoped slot; the JSON file is the durable one.
        identity = StorageIdentityProvider(
            session_storage=MemoryStorage(st.session_state),
            durable_storage=JsonFileStorage(settings.storage_path),
        )
        st.session_state[_SESSION_KEY] = ChatSession(identity=identity, settings=settings)
        st.session_state[_TICK_KEY] = time.monotonic()
    return st.session_state[_SESSION_KEY]


def run_submission(session: ChatSession, action: Callable[[], Awaitable[object]]) -> None:
    # 1) Echo appended messages as they land
    # 2) Show a typing bubble while the controller says so
    # 3) Rerun so the page is rebuilt from the store
    echo = st.container()
    typing_slot = st.empty()

    def on_append(event) -> None:
        with echo:
            render_message(event.message)

    def on_state(controller) -> None:
        if controller.is_typing:
            with typing_slot.container():
                with st.chat_message("assistant"):
                    st.markdown("_typing…_")
        else:
            typing_slot.empty()

    unsubscribe_store = session.store.subscribe(on_append)
    unsubscribe_state = session.controller.subscribe(on_state)
    try:
        asyncio.run(action())
    finally:
        unsubscribe_store()
        unsubscribe_state()
    st.rerun()


# ----------------------------
# Rendering
# ----------------------------
def render_message(msg: Message) -> None:
    with st.chat_message("user" if msg.role == "user" else "assistant"):
        if msg.role == "agent":
            st.markdown(msg.content)
        else:
            st.text(msg.content)


def render_chat(session: ChatSession) -> None:
    # Key line: the log gets the prompt chip's space back once the carousel is gone.
    height = 355 if session.show_prompts else 412
    with st.container(height=height, border=False):
        for msg in session.store.messages:
            render_message(msg)


def _catch_up_rotation(session: ChatSession) -> None:
    # Key line: the clock moves by whole intervals only, so partial intervals carry over.
    elapsed = time.monotonic() - st.session_state[_TICK_KEY]
    ticks = session.rotator.catch_up(elapsed)
    st.session_state[_TICK_KEY] += ticks * session.rotator.interval


@st.fragment(run_every=config.get_settings().prompt_interval_seconds)
def render_prompts(session: ChatSession) -> None:
    if not session.show_prompts:
        return
    _catch_up_rotation(session)
    st.caption(session.chat_config.suggested_prompts_title)
    clicked = st.button(
        session.rotator.current_prompt,
        key="suggested_prompt",
        disabled=not session.controller.can_submit,
    )
    if clicked:
        run_submission(session, session.choose_prompt)


def render_error(session: ChatSession) -> None:
    if session.controller.error:
        st.error(f"Error: {session.controller.error}")


# ----------------------------
# Main
# ----------------------------
def main() -> None:
    header = config.get_chat_config().header
    st.set_page_config(page_title=header.title, page_icon="💬")

    session = ensure_session()
    st.title(header.title)
    st.caption(header.description)

    render_chat(session)
    render_prompts(session)

    user_input = st.chat_input(
        session.chat_config.chat_input_placeholder,
        disabled=not session.controller.can_submit,
    )
    if user_input:
        run_submission(session, lambda: session.send(user_input))

    render_error(session)


if __name__ == "__main__":
    main()
