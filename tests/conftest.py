"""
Shared fixtures for the agent-chat test suite.

Nothing here touches the network: the agent client is replaced by FakeAgentClient and
identity by an in-memory provider.
"""

from __future__ import annotations

import threading
from typing import List, Optional

import pytest

import agent_chat.config as config
from agent_chat.config import ChatConfig, Settings
from agent_chat.core.chat_session import ChatSession
from agent_chat.core.identity import StorageIdentityProvider
from agent_chat.core.storage import MemoryStorage
from agent_chat.models.payload import AgentRequest, AgentResponse


class FakeAgentClient:
    """Records requests; replies with queued responses or raises queued errors."""

    def __init__(self, replies: Optional[list] = None) -> None:
        self.replies = list(replies or [])
        self.requests: List[AgentRequest] = []
        self.release = threading.Event()
        self.release.set()

    def send(self, request: AgentRequest) -> AgentResponse:
        self.requests.append(request)
        self.release.wait(timeout=5)
        reply = self.replies.pop(0) if self.replies else {"output_data": {"content": "ok"}}
        if isinstance(reply, BaseException):
            raise reply
        return AgentResponse.from_payload(reply)


@pytest.fixture(autouse=True)
def _quiet_config():
    config.DEBUG = False
    config.get_settings.cache_clear()
    config.get_chat_config.cache_clear()
    yield
    config.get_settings.cache_clear()
    config.get_chat_config.cache_clear()


@pytest.fixture
def fake_client() -> FakeAgentClient:
    return FakeAgentClient()


@pytest.fixture
def identity() -> StorageIdentityProvider:
    return StorageIdentityProvider(MemoryStorage(), MemoryStorage())


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(suggestedPrompts=["first prompt", "second prompt", "third prompt"])


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(storage_path=tmp_path / "storage.json", display_delay_seconds=0.0, prompt_interval_seconds=0.01)


@pytest.fixture
def make_session(chat_config, fake_client, identity, settings):
    def _make(**kwargs) -> ChatSession:
        params = {
            "chat_config": chat_config,
            "client": fake_client,
            "identity": identity,
            "settings": settings,
        }
        params.update(kwargs)
        return ChatSession(**params)

    return _make
