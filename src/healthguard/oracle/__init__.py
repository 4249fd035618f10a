"""Risk and advisory oracles."""

from healthguard.oracle.clients import (
    AdvisoryOracleClient,
    ClusterContext,
    GeminiAdvisoryOracle,
    GeminiRiskOracle,
    RiskOracleClient,
    StubAdvisoryOracle,
    StubRiskOracle,
    build_oracles,
)

__all__ = [
    "AdvisoryOracleClient",
    "ClusterContext",
    "GeminiAdvisoryOracle",
    "GeminiRiskOracle",
    "RiskOracleClient",
    "StubAdvisoryOracle",
    "StubRiskOracle",
    "build_oracles",
]
