"""Oracle output schemas and normalization helpers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from healthguard.models import AIAnalysisResult, HealthStatus
from healthguard.utils.text import truncate


class RiskAnalysisOutput(BaseModel):
    """Structured output of the risk oracle.

    Keys arrive in camelCase (``riskLevel``, ``predictedOutbreakChance``...).
    A risk level outside the three statuses fails validation, which callers
    treat as an oracle failure.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    risk_level: Literal["Green", "Yellow", "Red"]
    reasoning: str = ""
    predicted_outbreak_chance: float = 0.0
    possible_diagnosis: str = ""
    recommended_actions: list[str] = Field(default_factory=list)

    @field_validator("predicted_outbreak_chance")
    @classmethod
    def _clamp_chance(cls, value: float) -> float:
        if value < 0.0:
            return 0.0
        if value > 100.0:
            return 100.0
        return value

    def to_result(self) -> AIAnalysisResult:
        return AIAnalysisResult(
            risk_level=HealthStatus(self.risk_level),
            reasoning=truncate_reasoning(self.reasoning),
            recommended_actions=truncate_actions(self.recommended_actions),
            predicted_outbreak_chance=self.predicted_outbreak_chance,
            possible_diagnosis=truncate(self.possible_diagnosis, 200),
        )


def truncate_actions(items: list[str], max_items: int = 5, max_chars: int = 200) -> list[str]:
    """Drop blank actions and cap count and length."""
    cleaned: list[str] = []
    for item in items[:max_items]:
        value = (item or "").strip()
        if not value:
            continue
        cleaned.append(value[:max_chars])
    return cleaned


def truncate_reasoning(text: str, max_chars: int = 1000) -> str:
    return truncate(text, max_chars)
