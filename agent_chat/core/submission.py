# Role: Submission state machine for one chat component. Sends a user message to the agent, tracks the
# loading/typing flags the UI renders, and applies the reply (or an error) to the conversation log.

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Protocol

import agent_chat.config as config
from agent_chat.core.conversation import ConversationStore
from agent_chat.core.identity import IdentityProvider
from agent_chat.core.lifetime import Lifetime
from agent_chat.models.message import Message
from agent_chat.models.payload import AgentRequest, AgentResponse
from agent_chat.models.submission import SubmissionState

DEFAULT_DISPLAY_DELAY_SECONDS = 1.0


class AgentTransport(Protocol):
    def send(self, request: AgentRequest) -> AgentResponse: ...


StateListener = Callable[["SubmissionController"], None]


class SubmissionController:
    """
    Orchestrates one submission at a time.

    The controller does not lock against overlapping calls: callers are expected to disable
    sending while `is_loading` is true (see `can_submit`).
    """

    def __init__(
        self,
        store: ConversationStore,
        client: AgentTransport,
        identity: IdentityProvider,
        *,
        display_delay: float = DEFAULT_DISPLAY_DELAY_SECONDS,
        lifetime: Optional[Lifetime] = None,
    ) -> None:
        self.store = store
        self.client = client
        self.identity = identity
        self.display_delay = display_delay
        self.lifetime = lifetime or Lifetime()

        self.state = SubmissionState.IDLE
        self.is_typing = False
        self.is_loading = False
        self.error: Optional[str] = None
        self.last_request: Optional[AgentRequest] = None

        self._listeners: List[StateListener] = []

    @property
    def can_submit(self) -> bool:
        return not self.is_loading and not self.lifetime.closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _set_state(self, state: SubmissionState, *, typing: bool, loading: bool) -> None:
        self.state = state
        self.is_typing = typing
        self.is_loading = loading
        self._notify()

    async def submit(self, text: str) -> None:
        # 1) Skip empty input
        # 2) Clear error, optimistically append the user message
        # 3) Send request off the event loop
        # 4) Hold the reply for the display delay, then append it
        # 5) Any failure -> error; flags always reset in finally
        if self.lifetime.closed:
            return

        content = (text or "").strip()
        if not content:
            return

        self.error = None
        user_message = Message.user(content)
        self.store.append(user_message)

        try:
            request = AgentRequest.for_message(
                user_message,
                user_id=self.identity.get_or_create_user_id(),
                session_id=self.identity.get_or_create_session_id(),
            )
            self.last_request = request
            self._set_state(SubmissionState.SENDING, typing=True, loading=True)

            response = await asyncio.to_thread(self.client.send, request)
            if self.lifetime.closed:
                config.debug("Chat closed before the agent replied; dropping response.")
                return

            reply = response.reply_text()
            self._set_state(SubmissionState.AWAITING_DISPLAY, typing=True, loading=True)

            if not await self.lifetime.sleep(self.display_delay):
                return

            self.store.append(Message.agent(reply))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self.lifetime.closed:
                return
            config.debug("Error fetching agent response:", repr(e))
            self.error = str(e) or e.__class__.__name__
        finally:
            if self.lifetime.closed:
                # Torn down: reset quietly, nobody is rendering anymore.
                self.state = SubmissionState.IDLE
                self.is_typing = False
                self.is_loading = False
            else:
                self._set_state(SubmissionState.IDLE, typing=False, loading=False)
