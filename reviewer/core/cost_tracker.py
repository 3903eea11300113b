"""Token usage and cost accounting for model calls.

One tracker per review run. Each call is attributed to the component that
made it ("model_detector", "email_composer").
"""

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Per 1M tokens (USD), used when litellm has no price for a routed model name.
_FALLBACK_PRICING: dict[str, tuple[float, float]] = {
    "openai/gpt-4o": (2.50, 10.00),
    "openai/gpt-4o-mini": (0.15, 0.60),
    "google/gemini-2.0-flash-001": (0.10, 0.40),
    "google/gemini-flash-1.5": (0.075, 0.30),
}

_unpriced_models: set[str] = set()


def _pricing_name(model: str) -> str:
    """Drop the routing prefix: 'openrouter/openai/gpt-4o' -> 'openai/gpt-4o'."""
    return model.removeprefix("openrouter/")


@dataclass
class CallUsage:
    """Usage for a single model call."""

    model: str
    prompt_tokens: int
    completion_tokens: int
    component: str = ""

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    @property
    def cost(self) -> float:
        """Cost in USD from litellm's price table, else the local fallback."""
        name = _pricing_name(self.model)
        try:
            from litellm import completion_cost
            return completion_cost(
                model=name,
                prompt_tokens=self.prompt_tokens,
                completion_tokens=self.completion_tokens,
            )
        except Exception:
            if name in _FALLBACK_PRICING:
                input_rate, output_rate = _FALLBACK_PRICING[name]
                return (self.prompt_tokens * input_rate + self.completion_tokens * output_rate) / 1_000_000
            if self.model not in _unpriced_models:
                _unpriced_models.add(self.model)
                logger.warning("No pricing available for model '%s', cost will show as $0", self.model)
            return 0.0


@dataclass
class CostTracker:
    """Accumulates token usage across a review run."""

    calls: list[CallUsage] = field(default_factory=list)

    def record(self, model: str, usage: Any, component: str = "") -> CallUsage:
        """Record usage from a LiteLLM response.

        Args:
            model: Model identifier.
            usage: ``response.usage`` (may be None for some providers).
            component: Which component made the call.
        """
        call = CallUsage(
            model=model,
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            component=component,
        )
        if usage is not None:
            self.calls.append(call)
        return call

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def total_prompt_tokens(self) -> int:
        return sum(c.prompt_tokens for c in self.calls)

    @property
    def total_completion_tokens(self) -> int:
        return sum(c.completion_tokens for c in self.calls)

    @property
    def total_cost(self) -> float:
        return sum(c.cost for c in self.calls)

    def by_component(self) -> dict[str, dict[str, Any]]:
        """Calls, tokens and cost grouped by component."""
        breakdown: dict[str, dict[str, Any]] = {}
        for call in self.calls:
            stats = breakdown.setdefault(
                call.component or "unknown",
                {"calls": 0, "tokens": 0, "cost": 0.0},
            )
            stats["calls"] += 1
            stats["tokens"] += call.total_tokens
            stats["cost"] += call.cost
        return breakdown

    def to_dict(self) -> dict:
        return {
            "total_calls": self.call_count,
            "prompt_tokens": self.total_prompt_tokens,
            "completion_tokens": self.total_completion_tokens,
            "total_cost_usd": round(self.total_cost, 6),
            "by_component": self.by_component(),
        }
