# Role: Local terminal front end for the chat session (no web UI needed).
# Useful for trying the proxy end to end and seeing debug output in the terminal.

from __future__ import annotations

import asyncio
import threading
from typing import Optional

import agent_chat.config as config
config.load_env()

from agent_chat.core.chat_session import ChatSession
from agent_chat.core.conversation import ConversationEvent
from agent_chat.core.submission import SubmissionController
from agent_chat.models.submission import SubmissionState

_EXIT_COMMANDS = {"/exit", "exit", "quit", "/quit"}


def _print_event(event: ConversationEvent) -> None:
    if event.message.role == "agent":
        print(f"\nAgent: {event.message.content}")


def _print_state(controller: SubmissionController) -> None:
    if controller.state == SubmissionState.SENDING:
        print("Agent is typing...")
    elif controller.error:
        print(f"\nError: {controller.error}")


def _print_prompt_hint(session: ChatSession) -> None:
    if session.show_prompts:
        print(f"\n{session.chat_config.suggested_prompts_title}")
        print(f"  Suggestion: {session.rotator.current_prompt}  (/prompt to send, /next for another)")


async def read_line(prompt: str) -> str:
    # Key line: a daemon thread, not the default executor, so Ctrl-C exits without waiting for Enter.
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def deliver(result: object, error: Optional[BaseException]) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def worker() -> None:
        try:
            line, error = input(prompt), None
        except Exception as e:
            line, error = None, e
        try:
            loop.call_soon_threadsafe(deliver, line, error)
        except RuntimeError:
            # Loop already closed (the CLI is exiting).
            pass

    threading.Thread(target=worker, name="cli-input", daemon=True).start()
    return await future


async def run() -> None:
    # 1) Build a ChatSession and start the prompt rotation
    # 2) Read lines off the event loop so the rotation keeps ticking
    # 3) Route commands / messages into the session
    session = ChatSession()
    header = session.chat_config.header
    print(header.title)
    print(header.description)
    print("Commands: /prompt, /next, /session, /exit")
    print("-" * 50)

    session.store.subscribe(_print_event)
    session.controller.subscribe(_print_state)

    async with session:
        while True:
            _print_prompt_hint(session)
            try:
                user_message = (await read_line("\nYou: ")).strip()
            except EOFError:
                print("\nBye!")
                return

            if not user_message:
                continue

            cmd = user_message.lower()

            if cmd in _EXIT_COMMANDS:
                print("Bye!")
                return

            if cmd == "/session":
                print(f"session_id: {session.identity.get_or_create_session_id()}")
                print(f"user_id: {session.identity.get_or_create_user_id()}")
                continue

            if cmd == "/next":
                session.rotator.advance()
                continue

            if cmd == "/prompt":
                if not session.show_prompts:
                    print("Suggestions are only available before the conversation starts.")
                    continue
                prompt = session.rotator.current_prompt
                print(f"You: {prompt}")
                await session.choose_prompt()
                continue

            await session.send(user_message)


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nBye!")


if __name__ == "__main__":
    main()
