import json

import httpx

from assistant_core.api.service import query, run_query
from assistant_core.domain.conversation import MessageHistory
from assistant_core.domain.exceptions import ConfigError, ErrorKind, InternalError
from assistant_core.domain.models import Failure, Success


class SettingsStub:
    http_timeout = 1.0
    default_provider = "anthropic"


class KeyStub:
    def __init__(self, key="secret"):
        self.key = key

    def get_api_key(self, provider):
        return self.key


def install_client(monkeypatch, status_code=200, payload=None, text=None, error=None):
    captured = {"calls": 0}

    class Resp:
        def __init__(self):
            self.status_code = status_code
            self.text = text if text is not None else json.dumps(payload)

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, **kw):
            captured["calls"] += 1
            captured["url"] = url
            captured["json"] = json
            if error is not None:
                raise error
            return Resp()

    monkeypatch.setattr("httpx.Client", Client)
    return captured


def make_history():
    history = MessageHistory(system_prompt="You are a helpful assistant.")
    history.add_user_message('Highlighted text: "to be or not to be"', is_context=True)
    history.add_user_message("Explain this line.")
    return history


def test_query_anthropic_success(monkeypatch):
    captured = install_client(monkeypatch, payload={"content": [{"type": "text", "text": "It is about mortality."}]})
    answer = query(make_history(), {"provider": "anthropic"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "It is about mortality."
    body = captured["json"]
    assert body["model"] == "claude-sonnet-4-20250514"
    assert [m["role"] for m in body["messages"]] == ["user", "user"]


def test_query_gemini_success(monkeypatch):
    captured = install_client(
        monkeypatch,
        payload={"candidates": [{"content": {"parts": [{"text": "answer"}], "role": "model"}}]},
    )
    answer = query(make_history(), {"provider": "gemini"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "answer"
    assert "contents" in captured["json"]


def test_query_accepts_plain_dicts(monkeypatch):
    install_client(monkeypatch, payload={"message": {"role": "assistant", "content": "pong"}})
    answer = query([{"role": "user", "content": "ping"}], {"provider": "ollama"}, cfg=SettingsStub())
    assert answer == "pong"


def test_rate_limited_error_string(monkeypatch):
    install_client(monkeypatch, status_code=429, payload={"error": {"message": "rate limited"}})
    answer = query(make_history(), {"provider": "openai"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer.startswith("Error: ")
    assert "rate limited" in answer
    assert "429" in answer


def test_config_error_fails_fast(monkeypatch):
    captured = install_client(monkeypatch, payload={})
    answer = query(make_history(), {"provider": "nonexistent"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "Error: Unsupported provider: nonexistent"
    assert captured["calls"] == 0


def test_missing_key_outcome(monkeypatch):
    captured = install_client(monkeypatch, payload={})
    outcome = run_query(make_history(), {"provider": "openai"}, credentials=KeyStub(key=None), cfg=SettingsStub())
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, ConfigError)
    assert captured["calls"] == 0


def test_provider_override(monkeypatch):
    captured = install_client(monkeypatch, payload={"choices": [{"message": {"content": "ds"}}]})
    outcome = run_query(
        make_history(), {"provider": "openai"}, provider="deepseek", credentials=KeyStub(), cfg=SettingsStub()
    )
    assert outcome == Success("ds")
    assert captured["url"] == "https://api.deepseek.com/v1/chat/completions"


def test_default_provider_from_settings(monkeypatch):
    class OllamaSettings(SettingsStub):
        default_provider = "ollama"

    captured = install_client(monkeypatch, payload={"message": {"content": "local"}})
    assert query(make_history(), {}, cfg=OllamaSettings()) == "local"
    assert captured["json"]["stream"] is False


def test_error_inside_200(monkeypatch):
    install_client(monkeypatch, payload={"error": {"message": "quota exceeded"}})
    answer = query(make_history(), {"provider": "deepseek"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "Error: quota exceeded"


def test_malformed_json(monkeypatch):
    install_client(monkeypatch, text="not json at all")
    answer = query(make_history(), {"provider": "openai"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "Error: Invalid JSON response from OpenAI API: not json at all"


def test_debug_does_not_log_api_key(monkeypatch):
    install_client(monkeypatch, payload={"choices": [{"message": {"content": "ok"}}]})
    records = []
    monkeypatch.setattr(
        "assistant_core.providers.base.logger.info",
        lambda msg, *a, **kw: records.append((msg, kw.get("extra"))),
    )
    raw = {"provider": "openai", "features": {"debug": True}}
    answer = query(make_history(), raw, credentials=KeyStub("sk-very-secret"), cfg=SettingsStub())
    assert answer == "ok"
    assert [r[0] for r in records][:2] == ["OpenAI Request body", "OpenAI Raw response"]
    assert "sk-very-secret" not in repr(records)


def test_connection_failure_renders_error(monkeypatch):
    install_client(monkeypatch, error=httpx.ConnectError("connection refused"))
    answer = query(make_history(), {"provider": "openai"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer.startswith("Error: ")
    assert answer == "Error: Failed to connect to OpenAI API - connection refused"


def test_empty_body_renders_error(monkeypatch):
    install_client(monkeypatch, text="")
    answer = query(make_history(), {"provider": "anthropic"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer.startswith("Error: ")
    assert "Empty response" in answer


def test_null_provider_settings_still_queries(monkeypatch):
    install_client(monkeypatch, payload={"choices": [{"message": {"content": "ok"}}]})
    raw = {"provider": "openai", "provider_settings": None}
    assert query([{"role": "user", "content": "hi"}], raw, credentials=KeyStub(), cfg=SettingsStub()) == "ok"


def test_unexpected_exception_becomes_failure(monkeypatch):
    install_client(monkeypatch, error=RuntimeError("socket exploded"))
    outcome = run_query(make_history(), {"provider": "openai"}, credentials=KeyStub(), cfg=SettingsStub())
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, InternalError)
    assert outcome.error.kind is ErrorKind.INTERNAL
    assert outcome.message == "socket exploded"

    answer = query(make_history(), {"provider": "openai"}, credentials=KeyStub(), cfg=SettingsStub())
    assert answer == "Error: socket exploded"


def test_invalid_base_url_renders_error(monkeypatch):
    install_client(monkeypatch, error=httpx.InvalidURL("Invalid IPv6 URL"))
    raw = {"provider": "openai", "base_url": "http://[::1"}
    answer = query(make_history(), raw, credentials=KeyStub(), cfg=SettingsStub())
    assert answer.startswith("Error: Failed to connect to OpenAI API")
