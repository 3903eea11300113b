"""LLM client for the review pipeline.

Provides a single interface for model calls that absorbs boilerplate:
- Message building (including base64 PDF file parts)
- Cost tracking integration
- JSON parsing with repair fallback (JSON-mode calls only)
- Retry and fallback via the litellm Router

Two call styles:
- ``complete()``: JSON mode, returns parsed content. Lenient: a slightly
  broken JSON body is repaired with json_repair. Used for email drafting.
- ``complete_text()``: returns the raw text untouched so the caller can apply
  its own strict contract. Used by the model detector.
"""

import base64
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

from reviewer.core.config import LLMConfig
from reviewer.core.cost_tracker import CostTracker
from reviewer.core.llm_router import router

logger = logging.getLogger(__name__)

# Suppress LiteLLM debug noise (done once at module load)
logging.getLogger("litellm").setLevel(logging.ERROR)
logging.getLogger("httpx").setLevel(logging.ERROR)


@dataclass
class LLMResponse:
    """Parsed response from a JSON-mode call.

    Attributes:
        content: Parsed JSON content as a dictionary.
        raw_content: Raw string content from the LLM.
        model: Model identifier used for the call.
    """

    content: dict[str, Any]
    raw_content: str
    model: str


_FENCE_RE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)


def strip_code_fences(raw: str) -> str:
    """Remove ``` / ```json fences a model wraps around JSON despite instructions."""
    return _FENCE_RE.sub("", raw).strip()


def build_user_content(user_prompt: str, pdf_bytes: bytes | None = None) -> str | list[dict]:
    """User message content, with the PDF attached as a file part if given."""
    if pdf_bytes is None:
        return user_prompt
    encoded = base64.b64encode(pdf_bytes).decode("ascii")
    return [
        {"type": "text", "text": user_prompt},
        {
            "type": "file",
            "file": {"file_data": f"data:application/pdf;base64,{encoded}"},
        },
    ]


class LLMClient:
    """Client for making LLM API calls.

    Usage:
        client = LLMClient(cost_tracker=tracker)

        # JSON-mode call
        response = await client.complete(
            system_prompt="You draft emails.",
            user_prompt="...",
            model="openrouter/openai/gpt-4o",
            component="email_composer",
        )
        draft = response.content

        # Raw text call with the PDF attached
        raw = await client.complete_text(
            system_prompt=ANALYSIS_PROMPT,
            user_prompt="Analyze the attached document.",
            model="openrouter/google/gemini-2.0-flash-001",
            pdf_bytes=data,
            component="model_detector",
        )
    """

    def __init__(self, cost_tracker: CostTracker | None = None) -> None:
        """Initialize the client.

        Args:
            cost_tracker: Optional tracker for recording token usage.
        """
        self.cost_tracker = cost_tracker

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        component: str = "",
        temperature: float | None = None,
        response_format: dict[str, str] | None = None,
    ) -> LLMResponse:
        """Make a JSON-mode completion call.

        Args:
            system_prompt: System message content (instructions).
            user_prompt: User message content (the actual request).
            model: LLM model identifier.
            component: Component name for cost tracking.
            temperature: Sampling temperature. Defaults to 0.0.
            response_format: Response format dict. Defaults to JSON.

        Returns:
            LLMResponse with parsed JSON content.
        """
        raw_content = await self._call_llm(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=model,
            component=component,
            temperature=temperature if temperature is not None else LLMConfig.TEMPERATURE,
            response_format=response_format or LLMConfig.RESPONSE_FORMAT,
        )

        try:
            content = json.loads(strip_code_fences(raw_content))
        except json.JSONDecodeError:
            from json_repair import repair_json
            logger.warning("JSON parse failed, attempting repair")
            content = repair_json(raw_content, return_objects=True)

        return LLMResponse(
            content=content if isinstance(content, dict) else {},
            raw_content=raw_content,
            model=model,
        )

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        component: str = "",
        pdf_bytes: bytes | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Make a call and return the raw response text.

        Args:
            system_prompt: System message content.
            user_prompt: User message content.
            model: LLM model identifier.
            component: Component name for cost tracking.
            pdf_bytes: Optional PDF to attach as a base64 file part.
            temperature: Sampling temperature. Defaults to 0.0.
            max_tokens: Completion token budget.

        Returns:
            Response text, exactly as returned by the model.
        """
        return await self._call_llm(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": build_user_content(user_prompt, pdf_bytes)},
            ],
            model=model,
            component=component,
            temperature=temperature if temperature is not None else LLMConfig.TEMPERATURE,
            max_tokens=max_tokens,
        )

    async def check_connection(self, model: str) -> dict[str, Any]:
        """Send a tiny prompt to confirm the model is reachable.

        Returns:
            ``{"success": bool, "message": str, "latency_ms": int | None}``
        """
        start = time.monotonic()
        try:
            await self._call_llm(
                messages=[
                    {"role": "system", "content": 'Respond with "OK" to confirm connection.'},
                    {"role": "user", "content": "Test connection"},
                ],
                model=model,
                component="connection_check",
                temperature=LLMConfig.TEMPERATURE,
                max_tokens=10,
            )
        except Exception as e:
            return {"success": False, "message": str(e) or type(e).__name__, "latency_ms": None}
        latency_ms = int((time.monotonic() - start) * 1000)
        return {"success": True, "message": "Connection successful", "latency_ms": latency_ms}

    async def _call_llm(
        self,
        messages: list[dict[str, Any]],
        model: str,
        component: str,
        temperature: float,
        response_format: dict[str, str] | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Internal method that performs the actual call via the Router."""
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }
        if response_format:
            kwargs["response_format"] = response_format
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        response = await router.acompletion(**kwargs)

        if self.cost_tracker:
            self.cost_tracker.record(model, response.usage, component=component)

        return response.choices[0].message.content or ""
