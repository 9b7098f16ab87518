# Role: Outbound adapter for the agent proxy. POSTs an AgentRequest as JSON and returns the parsed AgentResponse.
# Failures are raised as typed errors; the submission controller decides how to surface them.

from __future__ import annotations

from typing import Optional

import requests

import agent_chat.config as config
from agent_chat.models.payload import AgentRequest, AgentResponse


class AgentClientError(RuntimeError):
    """Base class for failures talking to the agent proxy."""


class AgentHTTPError(AgentClientError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server error: {status_code}")
        self.status_code = status_code


class AgentTransportError(AgentClientError):
    """The proxy could not be reached."""


class AgentResponseError(AgentClientError):
    """The proxy answered 2xx but the body was not JSON."""


class AgentClient:
    _TIMEOUT_SECONDS = 30

    def __init__(self, proxy_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        settings = config.get_settings()
        self.proxy_url = proxy_url or settings.proxy_url
        self.timeout = timeout if timeout is not None else settings.request_timeout or self._TIMEOUT_SECONDS

    def send(self, request: AgentRequest) -> AgentResponse:
        # 1) POST JSON body
        # 2) Non-2xx -> AgentHTTPError
        # 3) Parse JSON (shape problems degrade inside AgentResponse)
        payload = request.model_dump(mode="json")
        config.debug("\n--- AGENT REQUEST ---\n", payload)

        try:
            r = requests.post(
                self.proxy_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AgentTransportError(f"Could not reach the agent proxy at {self.proxy_url}: {e}") from e

        if not 200 <= r.status_code < 300:
            config.debug("AGENT STATUS:", r.status_code)
            raise AgentHTTPError(r.status_code)

        try:
            body = r.json()
        except ValueError as e:
            raise AgentResponseError(f"Agent proxy returned invalid JSON: {e}") from e

        config.debug("AGENT RESPONSE:", body)
        return AgentResponse.from_payload(body)
