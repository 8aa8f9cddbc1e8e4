"""OpenAI-compatible adapter — implements the LlmGateway port.

Groq, Gemini and OpenAI all expose the chat-completions API, so one adapter
per provider (differing only in ``base_url``) covers every producer.
"""

from __future__ import annotations

import logging

from openai import APITimeoutError, AsyncOpenAI, AuthenticationError, RateLimitError

from repo_grader.domain.exceptions import ProducerError

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by an OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        provider: str = "openai",
        base_url: str | None = None,
        timeout: float = 20.0,
    ) -> None:
        # No SDK retries: the orchestrator moves on to the next producer instead.
        self._client = AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
        )
        self.provider = provider

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str,
        json_mode: bool = True,
    ) -> str:
        """Send a system + user prompt to *model* and return the completion text."""
        try:
            kwargs: dict[str, object] = {
                "model": model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": 0.7,
            }
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = await self._client.chat.completions.create(**kwargs)  # type: ignore[arg-type]

            if not response.choices:
                raise ProducerError(f"{self.provider} returned no choices.")
            content = response.choices[0].message.content
            if not content:
                raise ProducerError(f"{self.provider} returned an empty response.")

            return content

        except AuthenticationError as exc:
            raise ProducerError(f"Invalid {self.provider} API key.") from exc

        except RateLimitError as exc:
            logger.error("%s RateLimitError (%s): %s", self.provider, model, exc)
            raise ProducerError(f"{self.provider} rate limit / quota error: {exc}") from exc

        except APITimeoutError as exc:
            raise ProducerError(f"{self.provider} request timed out.") from exc

        except ProducerError:
            raise

        except Exception as exc:
            raise ProducerError(f"{self.provider} call failed: {exc}") from exc

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
