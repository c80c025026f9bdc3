"""Tests for settings loading and vision adapter selection."""

import os

from cardscan.adapters.vision.claude_vision import ClaudeVision
from cardscan.adapters.vision.mock_vision import MockVision
from cardscan.adapters.vision.openai_vision import OpenAIVision
from cardscan.services.config import Settings, build_vision, load_settings


def test_defaults_with_empty_env():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.vision_adapter == "openai"
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o"
    assert settings.max_tokens == 1024
    assert settings.placeholder_image == "/api/placeholder/60/90"


def test_env_values_are_read_and_coerced():
    settings = load_settings({
        "VISION_ADAPTER": "Claude",
        "OPENAI_API_KEY": "sk-test",
        "OPENAI_BASE_URL": "http://localhost:9100/v1",
        "VISION_MAX_TOKENS": "800",
        "VISION_TIMEOUT_S": "12.5",
        "CARD_PLACEHOLDER_IMAGE": "/img/back.png",
    })
    assert settings.vision_adapter == "claude"
    assert settings.openai_api_key == "sk-test"
    assert settings.openai_base_url == "http://localhost:9100/v1"
    assert settings.max_tokens == 800
    assert settings.timeout_s == 12.5
    assert settings.placeholder_image == "/img/back.png"


def test_blank_values_count_as_unset():
    settings = load_settings({"OPENAI_API_KEY": "   ", "OPENAI_VISION_MODEL": ""})
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o"


def test_build_vision_picks_adapter(status):
    assert isinstance(build_vision(load_settings({}), status), OpenAIVision)
    assert isinstance(build_vision(load_settings({"VISION_ADAPTER": "mock"}), status), MockVision)
    assert isinstance(build_vision(load_settings({"VISION_ADAPTER": "claude"}), status), ClaudeVision)


def test_build_vision_passes_credential_in(status):
    vision = build_vision(load_settings({"OPENAI_API_KEY": "sk-test", "OPENAI_VISION_MODEL": "gpt-4o-mini"}), status)
    assert vision.is_configured()
    assert vision.model == "gpt-4o-mini"
    assert not build_vision(load_settings({}), status).is_configured()


def test_unknown_adapter_falls_back_to_openai(status):
    vision = build_vision(load_settings({"VISION_ADAPTER": "kimi"}), status)
    assert isinstance(vision, OpenAIVision)
    assert any("unknown VISION_ADAPTER 'kimi'" in line for line in status.logs)


def test_dotenv_file_is_read_without_touching_environ(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_VISION_MODEL", raising=False)
    monkeypatch.setenv("VISION_MAX_TOKENS", "700")
    env_file = tmp_path / ".env"
    env_file.write_text("OPENAI_API_KEY=sk-from-file\nVISION_MAX_TOKENS=300\n")

    settings = load_settings(dotenv_path=env_file)

    assert settings.openai_api_key == "sk-from-file"
    assert settings.max_tokens == 700  # real environment wins
    assert "OPENAI_API_KEY" not in os.environ


def test_missing_dotenv_file_is_fine(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert load_settings(dotenv_path=tmp_path / "absent.env").openai_api_key is None
