"""Core data models for villages, field reports and outbreak clusters."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from healthguard.utils.time import utc_now


MAX_DOMINANT_SYMPTOMS = 3

# Disease type a worker submits when the oracle should infer a diagnosis.
UNKNOWN_DISEASE = "Unknown"


def cap_symptoms(symptoms: list[str], cap: int = MAX_DOMINANT_SYMPTOMS) -> list[str]:
    """Deduplicate preserving first-seen order and keep the newest ``cap`` entries."""
    distinct = list(dict.fromkeys(symptoms))
    if len(distinct) > cap:
        distinct = distinct[-cap:]
    return distinct


class HealthStatus(str, Enum):
    """Risk status of a village or cluster."""

    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"


class _CamelModel(BaseModel):
    """Serialized form uses camelCase keys, matching stored snapshots."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Coordinates(_CamelModel):
    """A point in degrees. Non-finite values are rejected."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)


class Comment(_CamelModel):
    """Free-form public comment on a village."""

    id: str
    author: str
    text: str
    timestamp: datetime = Field(default_factory=utc_now)


class AIAnalysisResult(_CamelModel):
    """Risk analysis for a village, produced by the oracle or the fallback."""

    risk_level: HealthStatus
    reasoning: str = ""
    recommended_actions: list[str] = Field(default_factory=list)
    predicted_outbreak_chance: float = Field(default=0.0, ge=0.0, le=100.0)
    possible_diagnosis: str = ""

    @field_validator("predicted_outbreak_chance", mode="before")
    @classmethod
    def _clamp_chance(cls, value: object) -> object:
        # Older snapshots stored the raw oracle reply, unclamped.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return min(100.0, max(0.0, float(value)))
        return value


class Village(_CamelModel):
    """A monitored settlement."""

    id: str
    name: str
    district: str
    coordinates: Coordinates
    population: int = Field(gt=0)
    active_cases: int = Field(default=0, ge=0)
    status: HealthStatus = HealthStatus.GREEN
    last_reported: datetime = Field(default_factory=utc_now)
    last_reporter_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("lastReporterName", "lastAshaWorker", "last_reporter_name"),
        serialization_alias="lastReporterName",
    )
    dominant_symptoms: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    last_analysis: Optional[AIAnalysisResult] = None

    @field_validator("dominant_symptoms")
    @classmethod
    def _cap_symptoms(cls, value: list[str]) -> list[str]:
        return cap_symptoms(value)

    @field_validator("comments", mode="before")
    @classmethod
    def _default_comments(cls, value: object) -> object:
        # Older snapshots store null here.
        return [] if value is None else value


SanitationStatus = Literal["Good", "Ok", "Worst"]


class CaseReport(_CamelModel):
    """A field report submitted by a health worker. Immutable."""

    model_config = ConfigDict(frozen=True)

    id: str
    village_id: str
    worker_name: str
    worker_location: str = ""
    sanitation_status: SanitationStatus = "Ok"
    disease_type: str = UNKNOWN_DISEASE
    symptoms: str = ""
    affected_count: int = Field(gt=0)
    notes: str = ""
    timestamp: datetime = Field(default_factory=utc_now)


class OutbreakCluster(_CamelModel):
    """A group of nearby at-risk villages."""

    id: str
    village_ids: list[str] = Field(min_length=2)
    center: Coordinates
    radius: float
    severity: HealthStatus
    ai_advice: str


class FleetSummary(BaseModel):
    """Headline numbers across all monitored villages."""

    village_count: int = 0
    total_active_cases: int = 0
    red_zones: int = 0
    yellow_zones: int = 0
