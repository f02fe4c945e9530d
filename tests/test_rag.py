from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests
from openai import OpenAIError

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import CompletionError
from uwchat_backend.schemas.chat import ChatMessage
from uwchat_backend.services.rag import (
    SYSTEM_PROMPT,
    OllamaCompleter,
    OpenAICompleter,
    build_completer,
    build_messages,
)


class TestBuildMessages:
    def test_single_turn(self):
        history = [ChatMessage(role="user", content="B")]

        assert build_messages(history, "C") == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "Context: C\n\nQuestion: B"},
        ]

    def test_earlier_turns_are_kept_in_order(self):
        history = [
            ChatMessage(role="user", content="A"),
            ChatMessage(role="assistant", content="answer to A"),
            ChatMessage(role="user", content="B"),
        ]

        messages = build_messages(history, "C")

        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[1]["content"] == "A"
        assert messages[2]["content"] == "answer to A"
        assert messages[3]["content"] == "Context: C\n\nQuestion: B"

    def test_citations_are_not_sent_to_the_model(self):
        history = [
            ChatMessage(role="assistant", content="x", citations=[]),
            ChatMessage(role="user", content="B"),
        ]

        assert build_messages(history, "C")[1] == {"role": "assistant", "content": "x"}

    def test_system_instruction_is_single_and_first(self):
        history = [
            ChatMessage(role="system", content="old system"),
            ChatMessage(role="user", content="B"),
        ]

        messages = build_messages(history, "C")

        assert messages[0]["content"] == SYSTEM_PROMPT
        assert sum(1 for m in messages if m["content"] == SYSTEM_PROMPT) == 1

    def test_rejects_empty_history(self):
        with pytest.raises(ValueError):
            build_messages([], "C")

    def test_rejects_trailing_assistant_turn(self):
        with pytest.raises(ValueError):
            build_messages([ChatMessage(role="assistant", content="x")], "C")


class _FakeCompletions:
    def __init__(self, content: str | None = "hi", error: Exception | None = None):
        self.content = content
        self.error = error
        self.kwargs: dict = {}

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai_client(completions: _FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


class TestOpenAICompleter:
    def test_passes_fixed_parameters(self):
        completions = _FakeCompletions(content="Answer")
        completer = OpenAICompleter(_openai_client(completions), "gpt-4o-mini", temperature=0.7, max_tokens=500)

        assert completer.complete([{"role": "user", "content": "q"}]) == "Answer"
        assert completions.kwargs["model"] == "gpt-4o-mini"
        assert completions.kwargs["temperature"] == 0.7
        assert completions.kwargs["max_tokens"] == 500

    def test_empty_content_becomes_empty_string(self):
        completer = OpenAICompleter(_openai_client(_FakeCompletions(content=None)), "m", 0.7, 500)
        assert completer.complete([]) == ""

    def test_sdk_error_is_wrapped(self):
        completions = _FakeCompletions(error=OpenAIError("rate limited"))
        completer = OpenAICompleter(_openai_client(completions), "m", 0.7, 500)

        with pytest.raises(CompletionError):
            completer.complete([])


class _FakeResponse:
    def __init__(self, payload: dict, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> dict:
        return self._payload


class TestOllamaCompleter:
    def test_posts_non_streaming_chat(self, monkeypatch: pytest.MonkeyPatch):
        calls = []

        def _fake_post(url, json=None, timeout=None):
            calls.append((url, json, timeout))
            return _FakeResponse({"message": {"content": "From Ollama"}})

        monkeypatch.setattr(requests, "post", _fake_post)
        completer = OllamaCompleter("http://ollama:11434/", "qwen", temperature=0.7, max_tokens=500, timeout=30)

        assert completer.complete([{"role": "user", "content": "q"}]) == "From Ollama"
        url, payload, timeout = calls[0]
        assert url == "http://ollama:11434/api/chat"
        assert payload["stream"] is False
        assert payload["options"] == {"temperature": 0.7, "num_predict": 500}
        assert timeout == 30

    def test_http_error_is_wrapped(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: _FakeResponse({}, status_code=502))
        completer = OllamaCompleter("http://ollama:11434", "qwen", 0.7, 500)

        with pytest.raises(CompletionError):
            completer.complete([])


class TestBuildCompleter:
    def test_ollama_provider(self):
        completer = build_completer(Settings(LLM_PROVIDER="ollama"))
        assert isinstance(completer, OllamaCompleter)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_completer(Settings(LLM_PROVIDER="nope"))
