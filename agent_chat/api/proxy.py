# Role: Thin same-origin proxy in front of the agent flow URL. The browser/UI posts the chat payload here;
# the flow URL (and its API key) stay server-side. The body is forwarded untouched.

from __future__ import annotations

from typing import Any, Dict

import requests
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

import agent_chat.config as config

router = APIRouter(tags=["proxy"])

_TIMEOUT_SECONDS = 60


@router.post("/api/proxy")
def proxy(payload: Dict[str, Any]) -> JSONResponse:
    # 1) Resolve upstream flow URL (+ optional bearer key)
    # 2) Forward JSON body
    # 3) Relay upstream status and JSON body
    flow_url = config.get_chat_config().flow_url
    if not flow_url:
        raise HTTPException(status_code=500, detail="Missing flow URL (set FLOW_URL or flowURL in chat config)")

    headers = {"Content-Type": "application/json"}
    api_key = config.get_settings().flow_api_key
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    try:
        r = requests.post(flow_url, json=payload, headers=headers, timeout=_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        config.debug("Proxy upstream failure:", repr(e))
        raise HTTPException(status_code=502, detail=f"Agent flow request failed: {e}") from e

    try:
        body = r.json()
    except ValueError:
        body = {"detail": r.text[:500]}

    config.debug("Proxy upstream status:", r.status_code)
    return JSONResponse(content=body, status_code=r.status_code)
