# Role: Single chat message schema for the conversation log. Frozen so an appended entry can never be
# mutated in place (the log is append-only).

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "agent"]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def agent(cls, content: str) -> "Message":
        return cls(role="agent", content=content)
