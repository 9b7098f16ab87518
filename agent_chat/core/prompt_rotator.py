# Role: Suggested-prompt carousel. Advances to the next prompt on a fixed interval and hides itself for good
# once the conversation starts or a prompt is picked.

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from agent_chat.core.conversation import ConversationEvent, ConversationStore
from agent_chat.core.lifetime import Lifetime

DEFAULT_INTERVAL_SECONDS = 4.0

SubmitFn = Callable[[str], Awaitable[None]]


class PromptRotator:
    def __init__(
        self,
        prompts: Sequence[str],
        submit: SubmitFn,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        store: Optional[ConversationStore] = None,
        lifetime: Optional[Lifetime] = None,
    ) -> None:
        if not prompts:
            raise ValueError("PromptRotator needs at least one prompt")
        self.prompts: List[str] = list(prompts)
        self.current_index = 0
        self.interval = interval
        self.lifetime = lifetime or Lifetime()
        self._submit = submit
        self._visible = True
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

        if store is not None:
            if not store.is_empty():
                self._visible = False
            self._unsubscribe = store.subscribe(self._on_append)

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def current_prompt(self) -> str:
        return self.prompts[self.current_index]

    def _on_append(self, event: ConversationEvent) -> None:
        # Key line: the first message hides the carousel; it never comes back.
        self.hide()

    def hide(self) -> None:
        self._visible = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def advance(self) -> int:
        self.current_index = (self.current_index + 1) % len(self.prompts)
        return self.current_index

    def catch_up(self, elapsed: float) -> int:
        """Apply every whole interval in `elapsed` seconds; returns how many intervals were consumed."""
        if self.interval <= 0 or elapsed < self.interval:
            return 0
        ticks = int(elapsed // self.interval)
        self.current_index = (self.current_index + ticks) % len(self.prompts)
        return ticks

    async def select(self, index: Optional[int] = None) -> str:
        if index is not None:
            self.current_index = index % len(self.prompts)
        prompt = self.current_prompt
        self.hide()
        await self._submit(prompt)
        return prompt

    async def run(self) -> None:
        # Ticks until the lifetime closes (the task is cancelled on close).
        while await self.lifetime.sleep(self.interval):
            self.advance()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = self.lifetime.track(asyncio.ensure_future(self.run()))
        return self._task

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
