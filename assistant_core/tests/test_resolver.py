import copy

import pytest

from assistant_core.config.resolver import merge_with_defaults, model_info, resolve
from assistant_core.domain.exceptions import ConfigError


class KeyStub:
    def __init__(self, keys=None):
        self.keys = keys or {}

    def get_api_key(self, provider):
        return self.keys.get(provider)


KEYS = KeyStub({"anthropic": "ak", "openai": "ok", "deepseek": "dk", "gemini": "gk"})


def test_resolve_fills_defaults():
    cfg = resolve({"provider": "openai"}, credentials=KEYS)
    assert cfg.provider == "openai"
    assert cfg.api_key == "ok"
    assert cfg.model == "gpt-4.1"
    assert cfg.base_url == "https://api.openai.com/v1/chat/completions"
    assert cfg.additional_parameters == {"temperature": 0.7, "max_tokens": 4096}


def test_resolve_falls_back_to_default_provider():
    cfg = resolve({}, credentials=KEYS)
    assert cfg.provider == "anthropic"


def test_provider_override_wins():
    cfg = resolve({"provider": "openai"}, "deepseek", credentials=KEYS)
    assert cfg.provider == "deepseek"
    assert cfg.model == "deepseek-chat"


def test_unsupported_provider():
    with pytest.raises(ConfigError) as exc:
        resolve({"provider": "nonexistent"}, credentials=KEYS)
    assert exc.value.code == "UNSUPPORTED_PROVIDER"
    assert "nonexistent" in exc.value.message


def test_missing_api_key():
    with pytest.raises(ConfigError) as exc:
        resolve({"provider": "gemini"}, credentials=KeyStub())
    assert exc.value.code == "MISSING_API_KEY"
    assert exc.value.render() == "Error: No API key found for provider gemini"


def test_ollama_does_not_need_key():
    cfg = resolve({"provider": "ollama"}, credentials=KeyStub())
    assert cfg.api_key is None
    assert cfg.base_url == "http://localhost:11434/api/chat"


def test_explicit_api_key_beats_store():
    cfg = resolve({"provider": "openai", "api_key": "explicit"}, credentials=KEYS)
    assert cfg.api_key == "explicit"


def test_caller_parameters_win_and_protocol_keys_split():
    raw = {
        "provider": "anthropic",
        "provider_settings": {
            "anthropic": {
                "model": "claude-3-5-haiku-20241022",
                "additional_parameters": {"max_tokens": 512, "anthropic_version": "2024-01-01"},
            }
        },
    }
    cfg = resolve(raw, credentials=KEYS)
    assert cfg.model == "claude-3-5-haiku-20241022"
    assert cfg.additional_parameters == {"max_tokens": 512}
    assert cfg.protocol_parameters == {"anthropic_version": "2024-01-01"}


def test_top_level_overrides_win():
    raw = {
        "provider": "openai",
        "model": "gpt-4o",
        "base_url": "https://proxy.example/v1/chat/completions",
        "additional_parameters": {"temperature": 0.1},
        "provider_settings": {
            "openai": {"model": "gpt-4.1-mini", "additional_parameters": {"temperature": 0.3}},
        },
    }
    cfg = resolve(raw, credentials=KEYS)
    assert cfg.model == "gpt-4o"
    assert cfg.base_url == "https://proxy.example/v1/chat/completions"
    assert cfg.additional_parameters["temperature"] == 0.1
    assert cfg.additional_parameters["max_tokens"] == 4096


def test_resolve_does_not_mutate_input():
    raw = {"provider": "openai", "features": {"debug": True}, "provider_settings": {}}
    before = copy.deepcopy(raw)
    cfg = resolve(raw, credentials=KEYS)
    assert raw == before
    assert cfg.debug is True


@pytest.mark.parametrize("provider", ["anthropic", "openai", "deepseek", "gemini", "ollama"])
def test_resolve_is_idempotent(provider):
    raw = {
        "provider": provider,
        "model": "custom-model",
        "features": {"debug": False},
        "provider_settings": {provider: {"additional_parameters": {"temperature": 0.2}}},
    }
    once = resolve(raw, credentials=KEYS)
    assert resolve(once, credentials=KEYS) == once
    assert resolve(once.as_raw(), credentials=KEYS) == once


def test_merge_with_defaults_keeps_caller_settings():
    merged = merge_with_defaults({"provider": "gemini", "provider_settings": {"gemini": {"model": "gemini-2.5-pro"}}})
    settings = merged["provider_settings"]["gemini"]
    assert settings["model"] == "gemini-2.5-pro"
    assert settings["additional_parameters"] == {"temperature": 0.7}


def test_model_info():
    assert model_info(None) == "default"
    assert model_info({"provider": "openai"}) == "gpt-4.1"
    assert model_info({"provider": "openai", "model": "o1"}) == "o1"
    assert model_info({"provider": "openai", "provider_settings": {"openai": {"model": "gpt-4o"}}}) == "gpt-4o"
    assert model_info({"provider": "unknown"}) == "default"


def test_null_sections_are_treated_as_empty():
    cfg = resolve({"provider": "openai", "provider_settings": {"openai": None}}, credentials=KEYS)
    assert cfg.model == "gpt-4.1"
    assert cfg.base_url == "https://api.openai.com/v1/chat/completions"

    cfg = resolve({"provider": "openai", "provider_settings": None, "additional_parameters": None}, credentials=KEYS)
    assert cfg.additional_parameters == {"temperature": 0.7, "max_tokens": 4096}

    raw = {"provider": "openai", "provider_settings": {"openai": {"additional_parameters": None}}}
    merged = merge_with_defaults(raw)
    assert merged["provider_settings"]["openai"]["additional_parameters"] == {"temperature": 0.7, "max_tokens": 4096}


def test_model_info_with_null_sections():
    assert model_info({"provider": "openai", "provider_settings": None}) == "gpt-4.1"
    assert model_info({"provider": "openai", "provider_settings": {"openai": None}}) == "gpt-4.1"
