from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from repo_grader.domain.exceptions import ProducerError
from repo_grader.infrastructure.config import GEMINI_BASE_URL, GROQ_BASE_URL, Settings
from repo_grader.infrastructure.openai_adapter import OpenAIAdapter
from repo_grader.infrastructure.usage_counter import InMemoryUsageCounter


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GROQ_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_no_keys_means_no_providers(self):
        assert Settings(_env_file=None).provider_configs() == []

    def test_provider_order_and_models(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-o")
        monkeypatch.setenv("GROQ_API_KEY", "gsk-g")
        monkeypatch.setenv("GEMINI_API_KEY", "ai-g")
        monkeypatch.setenv("GEMINI_MODELS", '["gemini-2.0-flash"]')

        configs = Settings(_env_file=None).provider_configs()

        assert [c.name for c in configs] == ["groq", "gemini", "openai"]
        assert configs[0].base_url == GROQ_BASE_URL
        assert configs[1].base_url == GEMINI_BASE_URL
        assert configs[1].models == ("gemini-2.0-flash",)
        assert configs[2].base_url is None

    def test_provider_without_models_skipped(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk-g")
        monkeypatch.setenv("GROQ_MODELS", "[]")
        assert Settings(_env_file=None).provider_configs() == []


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestOpenAIAdapter:
    async def test_complete_returns_content_and_requests_json(self):
        adapter = OpenAIAdapter("key", provider="groq", base_url=GROQ_BASE_URL)
        create = AsyncMock(return_value=_completion('{"score": 1}'))
        adapter._client.chat.completions.create = create

        text = await adapter.complete("sys", "user", model="llama-3.1-8b-instant")

        assert text == '{"score": 1}'
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "llama-3.1-8b-instant"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
        await adapter.close()

    async def test_empty_content_is_producer_error(self):
        adapter = OpenAIAdapter("key")
        adapter._client.chat.completions.create = AsyncMock(return_value=_completion(""))
        with pytest.raises(ProducerError):
            await adapter.complete("sys", "user", model="gpt-4o-mini")
        await adapter.close()

    async def test_unexpected_errors_wrapped(self):
        adapter = OpenAIAdapter("key", provider="gemini")
        adapter._client.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(ProducerError, match="gemini call failed"):
            await adapter.complete("sys", "user", model="gemini-1.5-flash-latest")
        await adapter.close()


def test_usage_counter():
    counter = InMemoryUsageCounter()
    assert counter.stats().total_analyses == 0
    assert counter.stats().last_updated is None

    counter.record(40)
    counter.record(81)

    stats = counter.stats()
    assert stats.total_analyses == 2
    assert stats.average_score == 60.5
    assert stats.last_updated is not None
