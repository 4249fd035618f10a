"""Risk and advisory oracle capabilities.

Each oracle has a Gemini-backed implementation and a deterministic stub.
Implementations raise ``OracleError`` on failure; recovering with fallback
values is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from healthguard.config import Settings
from healthguard.errors import OracleError
from healthguard.models import UNKNOWN_DISEASE, AIAnalysisResult, CaseReport, HealthStatus, Village
from healthguard.oracle.gemini import GeminiClient
from healthguard.oracle.prompt_loader import load_prompt
from healthguard.oracle.schemas import RiskAnalysisOutput
from healthguard.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class ClusterContext:
    """What the advisory oracle is told about a cluster."""

    members: tuple[Village, ...]
    severity: HealthStatus
    threshold_m: float

    @property
    def member_names(self) -> list[str]:
        return [village.name for village in self.members]


class RiskOracleClient(Protocol):
    """Turns a village and a new field report into a risk analysis."""

    def analyze(self, village: Village, report: CaseReport) -> AIAnalysisResult:
        """Return the analysis or raise OracleError."""


class AdvisoryOracleClient(Protocol):
    """Writes a coordinated action plan for an outbreak cluster."""

    def advise(self, context: ClusterContext) -> str:
        """Return advice text or raise OracleError."""


def risk_context_text(village: Village, report: CaseReport) -> str:
    """Render the village state and the report for the risk prompt."""
    return "\n".join(
        [
            "Village context:",
            f"- Name: {village.name}",
            f"- District: {village.district}",
            f"- Population: {village.population}",
            f"- Current active cases (before this report): {village.active_cases}",
            f"- Previous status: {village.status.value}",
            "",
            "New field report:",
            f"- Reported by: {report.worker_name}",
            f"- Specific location: {report.worker_location} (GPS verified)",
            f"- Sanitation/garbage condition: {report.sanitation_status} (CRITICAL FACTOR)",
            f"- Disease/suspected: {report.disease_type}",
            f"- Number of new people affected: {report.affected_count}",
            f"- Symptoms: {report.symptoms}",
            f"- Notes: {report.notes}",
        ]
    )


def cluster_context_text(context: ClusterContext) -> str:
    """Render a cluster for the advisory prompt."""
    lines = [f"Villages involved: {', '.join(context.member_names)}", "", "Details:"]
    for village in context.members:
        symptoms = ", ".join(village.dominant_symptoms) or "None reported"
        lines.append(
            f"- {village.name}: {village.active_cases} cases, "
            f"Status: {village.status.value}, Symptoms: {symptoms}"
        )
    km = context.threshold_m / 1000
    lines.append("")
    lines.append(
        f"This is a {context.severity.value.upper()} ALERT. "
        f"The villages are geographically close (<{km:g}km)."
    )
    return "\n".join(lines)


class GeminiRiskOracle:
    """Risk oracle backed by Gemini structured output."""

    def __init__(self, client: GeminiClient, prompt: str) -> None:
        self.client = client
        self.prompt = prompt

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiRiskOracle":
        prompt = load_prompt(kind="risk", prompt_version=settings.risk_prompt_version)
        return cls(GeminiClient(settings), prompt)

    def analyze(self, village: Village, report: CaseReport) -> AIAnalysisResult:
        full_prompt = f"{self.prompt}\n\nINPUT:\n{risk_context_text(village, report)}\n"
        output, latency_ms, attempts, error = self.client.generate_structured(
            full_prompt, RiskAnalysisOutput
        )
        if output is None:
            raise OracleError(f"risk analysis failed after {attempts} attempts: {error}")

        logger.info(
            "oracle.risk.ok",
            extra={
                "village_id": village.id,
                "risk_level": output.risk_level,
                "attempts": attempts,
                "latency_ms": latency_ms,
            },
        )
        return output.to_result()


class GeminiAdvisoryOracle:
    """Advisory oracle backed by Gemini free-text generation."""

    def __init__(self, client: GeminiClient, prompt: str) -> None:
        self.client = client
        self.prompt = prompt

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiAdvisoryOracle":
        prompt = load_prompt(kind="cluster", prompt_version=settings.cluster_prompt_version)
        return cls(GeminiClient(settings), prompt)

    def advise(self, context: ClusterContext) -> str:
        full_prompt = f"{self.prompt}\n\nINPUT:\n{cluster_context_text(context)}\n"
        text, latency_ms, attempts, error = self.client.generate_text(full_prompt)
        if text is None:
            raise OracleError(f"cluster advice failed after {attempts} attempts: {error}")
        text = text.strip()
        if not text:
            raise OracleError("cluster advice was empty")

        logger.info(
            "oracle.advice.ok",
            extra={"members": context.member_names, "attempts": attempts, "latency_ms": latency_ms},
        )
        return text


VECTOR_BORNE_TERMS = ("dengue", "malaria", "chikungunya")


def rule_based_analysis(village: Village, report: CaseReport) -> AIAnalysisResult:
    """Deterministic stand-in for the risk oracle, for offline runs."""
    total = village.active_cases + report.affected_count
    vector_borne = any(term in report.disease_type.lower() for term in VECTOR_BORNE_TERMS)

    if report.sanitation_status == "Worst" and (vector_borne or total >= 20):
        level = HealthStatus.RED
    elif report.sanitation_status == "Worst" or total >= 10:
        level = HealthStatus.YELLOW
    else:
        level = HealthStatus.GREEN

    chance = {HealthStatus.GREEN: 15.0, HealthStatus.YELLOW: 50.0, HealthStatus.RED: 85.0}[level]
    diagnosis = report.disease_type if report.disease_type != UNKNOWN_DISEASE else "Undetermined"
    return AIAnalysisResult(
        risk_level=level,
        reasoning=(
            f"{total} active cases with {report.sanitation_status.lower()} sanitation "
            f"(offline rule-based assessment)."
        ),
        recommended_actions=["Monitor situation closely", "Review sanitation conditions"],
        predicted_outbreak_chance=chance,
        possible_diagnosis=diagnosis,
    )


@dataclass
class StubRiskOracle:
    """Deterministic risk oracle.

    Returns ``result`` when set, raises ``error`` when set, and otherwise
    falls back to ``rule_based_analysis``. Every call is recorded.
    """

    result: Optional[AIAnalysisResult] = None
    error: Optional[Exception] = None
    calls: list[tuple[Village, CaseReport]] = field(default_factory=list)

    def analyze(self, village: Village, report: CaseReport) -> AIAnalysisResult:
        self.calls.append((village, report))
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return rule_based_analysis(village, report)


@dataclass
class StubAdvisoryOracle:
    """Deterministic advisory oracle that records the contexts it sees."""

    text: str = "Deploy rapid response teams to all cluster villages and pool testing supplies."
    error: Optional[Exception] = None
    contexts: list[ClusterContext] = field(default_factory=list)

    def advise(self, context: ClusterContext) -> str:
        self.contexts.append(context)
        if self.error is not None:
            raise self.error
        return self.text


def build_oracles(settings: Settings) -> tuple[RiskOracleClient, AdvisoryOracleClient]:
    """Construct the oracle pair selected by ``oracle_backend``."""
    if settings.oracle_backend == "stub":
        return StubRiskOracle(), StubAdvisoryOracle()
    return GeminiRiskOracle.from_settings(settings), GeminiAdvisoryOracle.from_settings(settings)
