# Role: Wire contract with the agent proxy. AgentRequest is what the client POSTs; AgentResponse is the
# permissive view of what comes back (unknown fields ignored, every level optional).

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

import agent_chat.config as config
from agent_chat.models.message import Message

FALLBACK_REPLY = "No valid response received from agent."


class RequestData(BaseModel):
    message: Message


class AgentRequest(BaseModel):
    data: RequestData
    stateful: bool = True
    stream: bool = False
    user_id: str = ""
    session_id: str = ""
    verbose: bool = False

    @classmethod
    def for_message(cls, message: Message, *, user_id: str, session_id: str) -> "AgentRequest":
        return cls(data=RequestData(message=message), user_id=user_id, session_id=session_id)


class OutputData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[str] = None


class AgentResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    output_data: Optional[OutputData] = Field(default=None)

    @classmethod
    def from_payload(cls, payload: Any) -> "AgentResponse":
        # Any JSON shape is accepted; anything that does not fit degrades to an empty response.
        if not isinstance(payload, dict):
            return cls()
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            config.debug("Agent response did not match expected shape:", e)
            return cls()

    def reply_text(self) -> str:
        # Key line: a missing or empty content field is a degraded reply, never an error.
        if self.output_data and self.output_data.content:
            return self.output_data.content
        return FALLBACK_REPLY
