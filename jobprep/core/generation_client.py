"""
Generation Client for JobPrep

Single-call wrapper around the Gemini text-generation REST API.

Each call to ``generate`` issues exactly one upstream request under a
finite deadline and maps every failure onto the upstream fault taxonomy:
- UpstreamUnavailable: network error, 5xx, rate limiting, unreadable body
- UpstreamTimeout: the per-call deadline elapsed
- UpstreamRefused: safety blocks and explicit request rejections

Retry policy lives in the RetryingGenerator, not here.
Integrated with Langfuse for observability and tracing.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx
from langfuse import Langfuse

from jobprep.config.settings import Settings, get_settings
from jobprep.core.exceptions import (
    UpstreamError,
    UpstreamRefused,
    UpstreamTimeout,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)

# Finish reasons that mean the provider withheld the content
REFUSAL_FINISH_REASONS = {
    "SAFETY",
    "RECITATION",
    "BLOCKLIST",
    "PROHIBITED_CONTENT",
    "SPII",
}


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call options for one upstream request."""

    operation: str = "generate"
    attempt: int = 1
    temperature: float | None = None
    max_output_tokens: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class TextGenerator(Protocol):
    """Anything that can turn an instruction into a raw reply."""

    async def generate(self, instruction: str, options: GenerationOptions | None = None) -> str:
        ...


def create_langfuse(settings: Settings) -> Langfuse | None:
    """Build a Langfuse client when tracing is enabled and configured."""
    if not settings.langfuse_enabled:
        return None
    if not (settings.langfuse_secret_key and settings.langfuse_public_key):
        logger.info("Langfuse keys not configured, tracing disabled")
        return None
    try:
        client = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_base_url,
        )
        logger.info("Langfuse initialized for LLM observability")
        return client
    except Exception as e:
        logger.warning(f"Failed to initialize Langfuse: {e}")
        return None


class GeminiGenerationClient:
    """
    Text generation through the Gemini ``generateContent`` endpoint.

    Replies are requested as ``application/json`` but are still treated as
    untrusted text; validation happens downstream.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        langfuse: Langfuse | None = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Configuration; defaults to the process-wide settings
            transport: Optional httpx transport (used by tests)
            langfuse: Optional tracing client; built from settings if omitted
        """
        self.settings = settings or get_settings()
        self.model = self.settings.gemini_model
        self.timeout = self.settings.gemini_timeout_seconds

        self.client = httpx.AsyncClient(
            base_url=self.settings.gemini_base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
            transport=transport,
        )

        self.langfuse = langfuse if langfuse is not None else create_langfuse(self.settings)

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # GENERATION
    # =========================================================================

    def _payload(self, instruction: str, options: GenerationOptions) -> dict[str, Any]:
        temperature = options.temperature
        if temperature is None:
            temperature = self.settings.generation_temperature
        max_tokens = options.max_output_tokens or self.settings.generation_max_output_tokens

        return {
            "contents": [
                {"role": "user", "parts": [{"text": instruction}]}
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def generate(self, instruction: str, options: GenerationOptions | None = None) -> str:
        """
        Issue exactly one upstream call.

        Args:
            instruction: Complete prompt text
            options: Operation name, attempt number and sampling overrides

        Returns:
            Raw reply text (unvalidated)

        Raises:
            UpstreamUnavailable, UpstreamTimeout, UpstreamRefused
        """
        options = options or GenerationOptions()
        span = self._start_span(instruction, options)

        logger.info(
            f"Calling {self.model} | operation={options.operation} | "
            f"attempt={options.attempt} | prompt_chars={len(instruction)}"
        )

        try:
            text = await asyncio.wait_for(
                self._post(instruction, options),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            error = UpstreamTimeout(f"{self.model} did not answer within {self.timeout:.1f}s")
            self._end_span(span, error=error)
            logger.error(f"Upstream timeout: {error.message}")
            raise error
        except UpstreamError as error:
            self._end_span(span, error=error)
            logger.error(f"Upstream {error.kind.value}: {error.message}")
            raise

        self._end_span(span, output=text)
        logger.debug(f"{options.operation} reply received, {len(text)} chars")
        return text

    async def _post(self, instruction: str, options: GenerationOptions) -> str:
        url = f"/v1beta/models/{self.model}:generateContent"

        try:
            response = await self.client.post(
                url,
                params={"key": self.settings.gemini_api_key},
                json=self._payload(instruction, options),
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(f"Request to {self.model} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Request to {self.model} failed: {e}") from e

        self._check_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Unreadable response body from {self.model}") from e

        return self._extract_text(data)

    def _check_status(self, response: httpx.Response):
        """Map non-success statuses to upstream faults."""
        status = response.status_code
        if status < 400:
            return

        detail = response.text[:300]
        if status == 429 or status >= 500:
            raise UpstreamUnavailable(f"{self.model} returned HTTP {status}: {detail}")
        if status == 408:
            raise UpstreamTimeout(f"{self.model} returned HTTP 408")
        raise UpstreamRefused(f"{self.model} rejected the request with HTTP {status}: {detail}")

    def _extract_text(self, data: Any) -> str:
        """Extract reply text from a generateContent response."""
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Response body was not a JSON object")

        feedback = data.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise UpstreamRefused(f"Prompt blocked: {feedback['blockReason']}")

        candidates = data.get("candidates") or []
        if not candidates:
            raise UpstreamRefused("Response contained no candidates")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason")
        if finish_reason in REFUSAL_FINISH_REASONS:
            raise UpstreamRefused(f"Generation stopped: {finish_reason}")

        parts = (candidate.get("content") or {}).get("parts") or []
        text_parts = []
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                text_parts.append(part["text"])
            elif isinstance(part, str):
                text_parts.append(part)
        return "".join(text_parts)

    # =========================================================================
    # TRACING
    # =========================================================================

    def _start_span(self, instruction: str, options: GenerationOptions):
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_generation(
                name=options.operation,
                model=self.model,
                input=instruction,
                metadata={"attempt": options.attempt, **options.metadata},
            )
        except Exception as lf_err:
            logger.warning(f"Langfuse span start failed: {lf_err}")
            return None

    def _end_span(self, span, output: str | None = None, error: UpstreamError | None = None):
        if span is None:
            return
        try:
            if error is not None:
                span.update(level="ERROR", status_message=f"{error.kind.value}: {error.message}")
            else:
                span.update(output=output)
            span.end()
        except Exception as lf_err:
            logger.warning(f"Langfuse span end failed: {lf_err}")

    def record_score(self, name: str, value: float, comment: str | None = None):
        """Record a numeric score in Langfuse, if tracing is on."""
        if not self.langfuse:
            return
        try:
            self.langfuse.create_score(name=name, value=value, comment=comment)
        except Exception as lf_err:
            logger.warning(f"Langfuse score failed: {lf_err}")
