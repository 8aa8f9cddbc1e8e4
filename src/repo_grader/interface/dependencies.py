"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from repo_grader.infrastructure.config import Settings, get_settings
from repo_grader.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_grader.infrastructure.openai_adapter import OpenAIAdapter
from repo_grader.infrastructure.usage_counter import InMemoryUsageCounter
from repo_grader.services.assess_repo import AssessRepoUseCase
from repo_grader.services.llm_producer import producers_for
from repo_grader.services.orchestrator import AssessmentOrchestrator

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None
_gateways: list[tuple[OpenAIAdapter, list[str]]] = []
_usage_counter = InMemoryUsageCounter()


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
    _gateways.clear()
    for provider in settings.provider_configs():
        adapter = OpenAIAdapter(
            provider.api_key,
            provider=provider.name,
            base_url=provider.base_url,
            timeout=settings.producer_timeout_seconds,
        )
        _gateways.append((adapter, list(provider.models)))

    if _gateways:
        logger.info("Generative providers: %s", ", ".join(g.provider for g, _ in _gateways))
    else:
        logger.info("No generative provider configured — rule-based grading only")


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    for adapter, _ in _gateways:
        await adapter.close()
    _gateways.clear()


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def get_usage_counter() -> InMemoryUsageCounter:
    return _usage_counter


def get_use_case() -> AssessRepoUseCase:
    """Build the use case with injected adapters."""
    settings = _settings()

    assert _http_client is not None, "startup() was not called"

    token = settings.github_token.get_secret_value() if settings.github_token else None
    orchestrator = AssessmentOrchestrator(
        producers_for(_gateways, settings.max_prompt_tokens),
        attempt_timeout=settings.producer_timeout_seconds,
    )

    return AssessRepoUseCase(
        repo_fetcher=GitHubRestAdapter(client=_http_client, token=token),
        orchestrator=orchestrator,
        max_tree_entries=settings.max_tree_entries,
        max_text_chars=settings.max_text_chars,
        max_commits=settings.max_commits,
    )
