"""Generative producer backed by one (provider, model) pair."""

from __future__ import annotations

from repo_grader.domain.entities import RepositorySnapshot
from repo_grader.domain.ports.llm_gateway import LlmGateway
from repo_grader.services.prompt_builder import build_system_prompt, build_user_prompt


class LlmProducer:
    """Implements ``AssessmentProducer`` on top of an :class:`LlmGateway`."""

    def __init__(self, gateway: LlmGateway, model: str, max_prompt_tokens: int = 24_000) -> None:
        self._gateway = gateway
        self._model = model
        self._max_prompt_tokens = max_prompt_tokens
        self.name = f"{gateway.provider}:{model}"

    async def produce(self, snapshot: RepositorySnapshot, persona: str) -> str:
        return await self._gateway.complete(
            build_system_prompt(persona),
            build_user_prompt(snapshot, self._max_prompt_tokens),
            model=self._model,
            json_mode=True,
        )

    def __repr__(self) -> str:
        return f"LlmProducer({self.name!r})"


def producers_for(
    gateways: list[tuple[LlmGateway, list[str]]], max_prompt_tokens: int = 24_000
) -> list[LlmProducer]:
    """Expand ``[(gateway, [model, ...]), ...]`` into an ordered producer list."""
    return [
        LlmProducer(gateway, model, max_prompt_tokens)
        for gateway, models in gateways
        for model in models
    ]
