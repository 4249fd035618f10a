"""Report ingestion package."""

from healthguard.ingestion.engine import ReportIngestionEngine, fallback_analysis, ingest
from healthguard.ingestion.reports import build_case_report

__all__ = ["ReportIngestionEngine", "fallback_analysis", "ingest", "build_case_report"]
