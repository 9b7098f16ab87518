# Role: Composition root for one mounted chat component. Wires config, identity, the agent client, the
# conversation log, the submission controller and the prompt carousel, and owns their shared lifetime.

from __future__ import annotations

from typing import Optional

import agent_chat.config as config
from agent_chat.clients.agent_client import AgentClient
from agent_chat.config import ChatConfig, Settings
from agent_chat.core.conversation import ConversationStore
from agent_chat.core.identity import IdentityProvider, StorageIdentityProvider
from agent_chat.core.lifetime import Lifetime
from agent_chat.core.prompt_rotator import PromptRotator
from agent_chat.core.storage import JsonFileStorage, MemoryStorage
from agent_chat.core.submission import AgentTransport, SubmissionController


class ChatSession:
    def __init__(
        self,
        chat_config: Optional[ChatConfig] = None,
        client: Optional[AgentTransport] = None,
        identity: Optional[IdentityProvider] = None,
        settings: Optional[Settings] = None,
        *,
        display_delay: Optional[float] = None,
        prompt_interval: Optional[float] = None,
    ) -> None:
        # Key line: every collaborator is injectable for tests; defaults come from env config.
        settings = settings or config.get_settings()
        self.chat_config = chat_config or config.get_chat_config()
        self.client = client or AgentClient(settings.proxy_url, settings.request_timeout)
        self.identity = identity or StorageIdentityProvider(MemoryStorage(), JsonFileStorage(settings.storage_path))

        self.lifetime = Lifetime()
        self.store = ConversationStore()
        self.controller = SubmissionController(
            self.store,
            self.client,
            self.identity,
            display_delay=settings.display_delay_seconds if display_delay is None else display_delay,
            lifetime=self.lifetime,
        )
        self.rotator = PromptRotator(
            self.chat_config.suggested_prompts,
            self.controller.submit,
            interval=settings.prompt_interval_seconds if prompt_interval is None else prompt_interval,
            store=self.store,
            lifetime=self.lifetime,
        )

    @property
    def closed(self) -> bool:
        return self.lifetime.closed

    @property
    def show_prompts(self) -> bool:
        return self.rotator.visible and self.store.is_empty()

    def start(self) -> None:
        # Needs a running event loop.
        self.rotator.start()

    async def send(self, text: str) -> None:
        await self.controller.submit(text)

    async def choose_prompt(self, index: Optional[int] = None) -> str:
        return await self.rotator.select(index)

    def close(self) -> None:
        self.rotator.stop()
        self.lifetime.close()

    async def __aenter__(self) -> "ChatSession":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()
