# Role: Central configuration module. Loads .env into environment variables and computes runtime flags (DEBUG).
# Also owns the two read-only config objects: runtime Settings (env) and ChatConfig (header, prompts, flow URL).
# Importers read agent_chat.config.DEBUG to control debug output without threading flags through every call.

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEBUG: bool = False

DEFAULT_PROXY_URL = "http://127.0.0.1:8000/api/proxy"
DEFAULT_STORAGE_PATH = Path.home() / ".agent_chat" / "storage.json"


def load_env() -> None:
    """
    Load .env into os.environ, then recompute DEBUG.
    This makes DEBUG correct even if load_env() is called after import.
    """
    global DEBUG
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}
    get_settings.cache_clear()
    get_chat_config.cache_clear()


def debug(*parts: object) -> None:
    # Role: single gate for diagnostic output.
    if DEBUG:
        print(*parts)


class HeaderConfig(BaseModel):
    title: str = "Chat with Uttkarsh"
    description: str = (
        "Explore more about me—my experiences, interests, and insights. "
        "Ask anything and dive deeper into what I do!"
    )


class ChatConfig(BaseModel):
    # Key line: camelCase aliases let the original JS config object be dropped in as JSON.
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    flow_url: Optional[str] = Field(
        default="https://api.zerowidth.ai/v1/process/IocJSfGIqpnNm2SZgjQq/ZTIHyiW164z3XuUqTsFC",
        alias="flowURL",
    )
    header: HeaderConfig = Field(default_factory=HeaderConfig)
    suggested_prompts_title: str = Field(
        default="What would you like to know about me?", alias="suggestedPromptsTitle"
    )
    suggested_prompts: List[str] = Field(
        default_factory=lambda: [
            "Tell me about your projects and experience",
            "What are your interests and background?",
            "How would you describe your work style?",
        ],
        alias="suggestedPrompts",
    )
    chat_input_placeholder: str = Field(default="Go ahead, type something...", alias="chatInputPlaceholder")
    max_chat_height: int = Field(default=200, alias="maxChatHeight")

    @field_validator("suggested_prompts")
    @classmethod
    def _non_empty_prompts(cls, value: List[str]) -> List[str]:
        prompts = [p.strip() for p in value if isinstance(p, str) and p.strip()]
        if not prompts:
            raise ValueError("suggestedPrompts must contain at least one prompt")
        return prompts


class Settings(BaseModel):
    """Runtime settings read from environment variables (after load_env())."""

    model_config = ConfigDict(frozen=True)

    chat_config_path: Optional[str] = None
    proxy_url: str = DEFAULT_PROXY_URL
    flow_url: Optional[str] = None
    flow_api_key: Optional[str] = None
    request_timeout: float = 30.0
    display_delay_seconds: float = 1.0
    prompt_interval_seconds: float = 4.0
    storage_path: Path = DEFAULT_STORAGE_PATH

    @classmethod
    def from_env(cls) -> "Settings":
        values = {
            "chat_config_path": os.getenv("CHAT_CONFIG_PATH") or None,
            "proxy_url": os.getenv("AGENT_PROXY_URL") or DEFAULT_PROXY_URL,
            "flow_url": os.getenv("FLOW_URL") or None,
            "flow_api_key": os.getenv("FLOW_API_KEY") or None,
            "request_timeout": os.getenv("AGENT_REQUEST_TIMEOUT", "30"),
            "display_delay_seconds": os.getenv("DISPLAY_DELAY_SECONDS", "1.0"),
            "prompt_interval_seconds": os.getenv("PROMPT_INTERVAL_SECONDS", "4.0"),
            "storage_path": os.getenv("AGENT_CHAT_STORAGE_PATH") or DEFAULT_STORAGE_PATH,
        }
        return cls(**values)


def load_chat_config(path: Optional[str] = None) -> ChatConfig:
    # 1) No path -> built-in defaults
    # 2) Otherwise read a JSON object (camelCase or snake_case keys)
    if not path:
        return ChatConfig()
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Chat config at {path} must be a JSON object")
    return ChatConfig.model_validate(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def get_chat_config() -> ChatConfig:
    settings = get_settings()
    chat_config = load_chat_config(settings.chat_config_path)
    # Key line: FLOW_URL in the environment wins over the config file.
    if settings.flow_url:
        chat_config = chat_config.model_copy(update={"flow_url": settings.flow_url})
    return chat_config
