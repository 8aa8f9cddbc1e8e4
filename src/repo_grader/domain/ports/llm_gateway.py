"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class LlmGateway(Protocol):
    """Abstract contract for one chat-completion provider."""

    provider: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str,
        json_mode: bool = True,
    ) -> str:
        """Send a system + user prompt pair to *model* and return the raw text."""
        ...
