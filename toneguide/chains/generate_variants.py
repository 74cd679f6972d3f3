"""Anthropic-backed text generation for rewrite variants.

Makes exactly one messages.create call per request. Retries and fallback are
the orchestrator's decision, not this module's.
"""

import time
from typing import Protocol

from toneguide.core.config import Settings, get_settings
from toneguide.core.errors import GenerationTimeoutError, TransportError
from toneguide.core.logging import get_logger

logger = get_logger(__name__)


class VariantGenerator(Protocol):
    """Async text-generation backend: (system prompt, user prompt) -> raw text."""

    async def __call__(self, system_prompt: str, user_prompt: str) -> str: ...


class AnthropicVariantGenerator:
    """VariantGenerator backed by the Anthropic Messages API."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        if not self.settings.ANTHROPIC_API_KEY:
            raise TransportError("ANTHROPIC_API_KEY is not configured")
        self._client = None

    def _get_client(self):
        if self._client is None:
            from anthropic import AsyncAnthropic

            # The orchestrator owns the timeout; the SDK must not retry behind it
            self._client = AsyncAnthropic(
                api_key=self.settings.ANTHROPIC_API_KEY,
                max_retries=0,
            )
        return self._client

    async def __call__(self, system_prompt: str, user_prompt: str) -> str:
        import anthropic

        client = self._get_client()
        model = self.settings.REWRITE_MODEL

        logger.info(f"Calling {model} for variant generation")

        start = time.time()
        try:
            response = await client.messages.create(
                model=model,
                max_tokens=self.settings.REWRITE_MAX_TOKENS,
                temperature=self.settings.REWRITE_TEMPERATURE,
                system=[
                    {
                        "type": "text",
                        "text": system_prompt,
                        "cache_control": {"type": "ephemeral"},
                    }
                ],
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APITimeoutError as e:
            raise GenerationTimeoutError(f"Generation backend timed out: {e}") from e
        except anthropic.APIStatusError as e:
            raise TransportError(f"Generation backend returned {e.status_code}") from e
        except anthropic.APIConnectionError as e:
            raise TransportError(f"Generation backend unreachable: {e}") from e
        duration_ms = int((time.time() - start) * 1000)

        usage = getattr(response, "usage", None)
        logger.debug(
            f"Variant generation finished ({duration_ms}ms)",
            extra={
                "model": model,
                "tokens_input": getattr(usage, "input_tokens", 0),
                "tokens_output": getattr(usage, "output_tokens", 0),
            },
        )

        text_blocks = [
            block.text for block in (response.content or []) if getattr(block, "text", None)
        ]
        if not text_blocks:
            raise TransportError("Generation backend returned an empty response")
        return "".join(text_blocks)
