# Role: Identity provider. Derives and persists the two opaque identifiers sent with every request:
# a session id (session-scoped storage) and a user id (durable storage). Both are capped at 32 characters.

from __future__ import annotations

import threading
import uuid
from typing import Optional, Protocol

import agent_chat.config as config
from agent_chat.core.storage import KeyValueStorage, StorageUnavailableError

SESSION_ID_KEY = "sessionId"
USER_ID_KEY = "userId"
MAX_IDENTIFIER_LENGTH = 32


class IdentityProvider(Protocol):
    def get_or_create_session_id(self) -> str: ...

    def get_or_create_user_id(self) -> str: ...


def new_identifier() -> str:
    # Key line: uuid4 text is 36 chars; dropping the 4 dashes leaves 32 hex chars.
    return str(uuid.uuid4()).replace("-", "")[:MAX_IDENTIFIER_LENGTH]


def is_usable_identifier(value: Optional[str]) -> bool:
    return bool(value) and len(value) <= MAX_IDENTIFIER_LENGTH


class StorageIdentityProvider:
    """
    Reads each identifier from its storage scope and regenerates it when missing or over-long.

    A scope set to None means there is no client context (e.g. server-side rendering); the
    provider then returns "" instead of failing.
    """

    def __init__(
        self,
        session_storage: Optional[KeyValueStorage] = None,
        durable_storage: Optional[KeyValueStorage] = None,
    ) -> None:
        self.session_storage = session_storage
        self.durable_storage = durable_storage
        self._lock = threading.Lock()

    def get_or_create_session_id(self) -> str:
        return self._get_or_create(self.session_storage, SESSION_ID_KEY)

    def get_or_create_user_id(self) -> str:
        return self._get_or_create(self.durable_storage, USER_ID_KEY)

    def _get_or_create(self, storage: Optional[KeyValueStorage], key: str) -> str:
        # 1) No storage -> degraded empty identifier
        # 2) Reuse a stored value if it is non-empty and <= 32 chars
        # 3) Otherwise generate, write back, return
        if storage is None:
            return ""

        with self._lock:
            try:
                current = storage.get_item(key)
                if is_usable_identifier(current):
                    return current

                fresh = new_identifier()
                storage.set_item(key, fresh)
            except StorageUnavailableError as e:
                config.debug(f"Identity storage unavailable for {key}:", e)
                return ""

        config.debug(f"Generated new {key}: {fresh}")
        return fresh


class StaticIdentityProvider:
    # Role: fixed identifiers (tests, scripted runs).
    def __init__(self, session_id: str = "", user_id: str = "") -> None:
        self.session_id = session_id
        self.user_id = user_id

    def get_or_create_session_id(self) -> str:
        return self.session_id

    def get_or_create_user_id(self) -> str:
        return self.user_id
