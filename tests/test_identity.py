"""
Tests for agent_chat.core.identity and agent_chat.core.storage.

Covers:
  - Identifier format (<= 32 chars, alphanumeric)
  - Reuse of valid stored ids, regeneration of missing/empty/over-long ones
  - Session vs durable scopes
  - Degraded mode (no storage, failing storage)
  - JsonFileStorage persistence across instances
"""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

from conftest import FakeAgentClient

from agent_chat.core.conversation import ConversationStore
from agent_chat.core.identity import (
    MAX_IDENTIFIER_LENGTH,
    SESSION_ID_KEY,
    USER_ID_KEY,
    StorageIdentityProvider,
    new_identifier,
)
from agent_chat.core.storage import JsonFileStorage, MemoryStorage, StorageUnavailableError
from agent_chat.core.submission import SubmissionController


class TestNewIdentifier:
    def test_length_and_alphabet(self) -> None:
        for _ in range(50):
            ident = new_identifier()
            assert len(ident) == MAX_IDENTIFIER_LENGTH
            assert ident.isalnum()
            assert "-" not in ident

    def test_identifiers_are_random(self) -> None:
        assert len({new_identifier() for _ in range(20)}) == 20


class TestStorageIdentityProvider:
    def test_generates_and_persists_session_id(self) -> None:
        session = MemoryStorage()
        provider = StorageIdentityProvider(session_storage=session)

        sid = provider.get_or_create_session_id()

        assert len(sid) <= MAX_IDENTIFIER_LENGTH
        assert sid.isalnum()
        assert session.get_item(SESSION_ID_KEY) == sid

    def test_idempotent_without_external_mutation(self, identity) -> None:
        assert identity.get_or_create_session_id() == identity.get_or_create_session_id()
        assert identity.get_or_create_user_id() == identity.get_or_create_user_id()

    def test_scopes_are_independent(self) -> None:
        session, durable = MemoryStorage(), MemoryStorage()
        provider = StorageIdentityProvider(session, durable)

        sid = provider.get_or_create_session_id()
        uid = provider.get_or_create_user_id()

        assert sid != uid
        assert session.get_item(USER_ID_KEY) is None
        assert durable.get_item(SESSION_ID_KEY) is None
        assert durable.get_item(USER_ID_KEY) == uid

    def test_reuses_valid_stored_value(self) -> None:
        durable = MemoryStorage({USER_ID_KEY: "abc123"})
        provider = StorageIdentityProvider(durable_storage=durable)

        assert provider.get_or_create_user_id() == "abc123"

    def test_regenerates_over_long_legacy_value(self) -> None:
        legacy = "8f14e45f-ceea-467f-a8f3-3c5e1b7a9d21"  # 36 chars, dashed uuid
        durable = MemoryStorage({USER_ID_KEY: legacy})
        provider = StorageIdentityProvider(durable_storage=durable)

        uid = provider.get_or_create_user_id()

        assert uid != legacy
        assert len(uid) <= MAX_IDENTIFIER_LENGTH
        assert durable.get_item(USER_ID_KEY) == uid

    def test_regenerates_empty_value(self) -> None:
        session = MemoryStorage({SESSION_ID_KEY: ""})
        provider = StorageIdentityProvider(session_storage=session)

        assert provider.get_or_create_session_id() != ""

    def test_exactly_32_chars_is_kept(self) -> None:
        value = "a" * 32
        provider = StorageIdentityProvider(session_storage=MemoryStorage({SESSION_ID_KEY: value}))

        assert provider.get_or_create_session_id() == value

    def test_no_storage_returns_empty(self) -> None:
        provider = StorageIdentityProvider()

        assert provider.get_or_create_session_id() == ""
        assert provider.get_or_create_user_id() == ""

    def test_unavailable_storage_returns_empty(self) -> None:
        broken = MagicMock()
        broken.get_item.side_effect = StorageUnavailableError("disk gone")
        provider = StorageIdentityProvider(durable_storage=broken)

        assert provider.get_or_create_user_id() == ""

    def test_concurrent_calls_agree(self) -> None:
        provider = StorageIdentityProvider(session_storage=MemoryStorage())
        results = []

        def worker() -> None:
            results.append(provider.get_or_create_session_id())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1


class TestStorageBackends:
    def test_memory_storage_wraps_mapping(self) -> None:
        backing = {}
        storage = MemoryStorage(backing)

        storage.set_item("k", "v")

        assert backing == {"k": "v"}
        assert storage.get_item("k") == "v"

    def test_memory_storage_ignores_non_string(self) -> None:
        assert MemoryStorage({"k": 5}).get_item("k") is None

    def test_json_file_storage_survives_new_instance(self, tmp_path) -> None:
        path = tmp_path / "nested" / "storage.json"
        first = StorageIdentityProvider(durable_storage=JsonFileStorage(path))
        uid = first.get_or_create_user_id()

        second = StorageIdentityProvider(durable_storage=JsonFileStorage(path))

        assert path.exists()
        assert second.get_or_create_user_id() == uid

    def test_json_file_storage_recovers_from_corrupt_file(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)

        assert storage.get_item(USER_ID_KEY) is None
        storage.set_item(USER_ID_KEY, "abc")
        assert JsonFileStorage(path).get_item(USER_ID_KEY) == "abc"

    def test_json_file_storage_recovers_from_undecodable_bytes(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        path.write_bytes(b'{"userId": "\xff\xfe"}')
        provider = StorageIdentityProvider(durable_storage=JsonFileStorage(path))

        uid = provider.get_or_create_user_id()

        assert uid.isalnum()
        assert len(uid) == MAX_IDENTIFIER_LENGTH
        assert JsonFileStorage(path).get_item(USER_ID_KEY) == uid

    async def test_undecodable_durable_file_does_not_block_submissions(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        path.write_bytes(b'{"userId": "\xff\xfe"}')
        client = FakeAgentClient()
        store = ConversationStore()
        identity = StorageIdentityProvider(MemoryStorage(), JsonFileStorage(path))
        controller = SubmissionController(store, client, identity, display_delay=0.0)

        await controller.submit("hello")
        await controller.submit("again")

        assert controller.error is None
        assert len(client.requests) == 2
        assert client.requests[0].user_id == client.requests[1].user_id != ""
        assert [m.role for m in store.messages] == ["user", "agent", "user", "agent"]

    def test_session_storage_is_not_durable(self) -> None:
        durable = MemoryStorage()
        uid = StorageIdentityProvider(MemoryStorage(), durable).get_or_create_user_id()
        sid_a = StorageIdentityProvider(MemoryStorage(), durable).get_or_create_session_id()
        sid_b = StorageIdentityProvider(MemoryStorage(), durable).get_or_create_session_id()

        assert sid_a != sid_b
        assert StorageIdentityProvider(MemoryStorage(), durable).get_or_create_user_id() == uid
