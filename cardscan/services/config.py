"""Service settings. Loaded once from the environment (plus cardscan/.env) and injected."""
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel

from cardscan.adapters.vision.mock_vision import MockVision
from cardscan.adapters.vision.openai_vision import DEFAULT_BASE_URL, DEFAULT_MODEL as OPENAI_DEFAULT_MODEL, OpenAIVision
from cardscan.adapters.vision.claude_vision import DEFAULT_MODEL as CLAUDE_DEFAULT_MODEL, ClaudeVision
from cardscan.recognizer.parsing import PLACEHOLDER_IMAGE

DOTENV_PATH = Path(__file__).resolve().parent.parent / ".env"


# Settings field -> environment variable
ENV_VARS = {
    "vision_adapter": "VISION_ADAPTER",
    "openai_api_key": "OPENAI_API_KEY",
    "openai_base_url": "OPENAI_BASE_URL",
    "openai_model": "OPENAI_VISION_MODEL",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "claude_model": "CLAUDE_VISION_MODEL",
    "max_tokens": "VISION_MAX_TOKENS",
    "timeout_s": "VISION_TIMEOUT_S",
    "placeholder_image": "CARD_PLACEHOLDER_IMAGE",
}


class Settings(BaseModel):
    model_config = {"extra": "ignore"}

    vision_adapter: str = "openai"   # openai | claude | mock
    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_BASE_URL
    openai_model: str = OPENAI_DEFAULT_MODEL
    anthropic_api_key: Optional[str] = None
    claude_model: str = CLAUDE_DEFAULT_MODEL
    max_tokens: int = 1024
    timeout_s: float = 60.0
    placeholder_image: str = PLACEHOLDER_IMAGE


def load_settings(env: Mapping[str, str] | None = None, dotenv_path: Path = DOTENV_PATH) -> Settings:
    """
    Build Settings from an env mapping. With env=None, values from cardscan/.env
    are overlaid with os.environ (real environment variables win). The process
    environment itself is never modified. Empty values count as unset.
    """
    if env is None:
        env = {**dotenv_values(dotenv_path), **os.environ}

    data = {}
    for name, var in ENV_VARS.items():
        value = (env.get(var) or "").strip()
        if value:
            data[name] = value

    data["vision_adapter"] = str(data.get("vision_adapter", "openai")).lower()
    return Settings.model_validate(data)


def build_vision(settings: Settings, status_store):
    """Pick the vision adapter from settings.vision_adapter (openai | claude | mock)."""
    if settings.vision_adapter == "claude":
        return ClaudeVision(status_store, api_key=settings.anthropic_api_key, model=settings.claude_model,
                            max_tokens=settings.max_tokens, timeout=settings.timeout_s)

    if settings.vision_adapter == "mock":
        return MockVision(status_store)

    if settings.vision_adapter != "openai":
        status_store.log(f"vision: unknown VISION_ADAPTER '{settings.vision_adapter}', using openai")

    return OpenAIVision(status_store, api_key=settings.openai_api_key, base_url=settings.openai_base_url,
                        model=settings.openai_model, max_tokens=settings.max_tokens, timeout=settings.timeout_s)
