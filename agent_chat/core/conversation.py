# Role: Append-only conversation log. Every append is recorded as a ConversationEvent so the log can be replayed
# and intermediate states asserted; listeners are notified synchronously after each append.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from agent_chat.models.message import Message


@dataclass(frozen=True)
class ConversationEvent:
    index: int
    message: Message


Listener = Callable[[ConversationEvent], None]


class ConversationStore:
    def __init__(self) -> None:
        self._messages: List[Message] = []
        self._events: List[ConversationEvent] = []
        self._listeners: List[Listener] = []

    @classmethod
    def replay(cls, events: Iterable[ConversationEvent]) -> "ConversationStore":
        store = cls()
        for event in sorted(events, key=lambda e: e.index):
            store.append(event.message)
        return store

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def events(self) -> Tuple[ConversationEvent, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._messages)

    def is_empty(self) -> bool:
        return not self._messages

    def append(self, message: Message) -> ConversationEvent:
        event = ConversationEvent(index=len(self._messages), message=message)
        self._messages.append(message)
        self._events.append(event)
        for listener in list(self._listeners):
            listener(event)
        return event

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
