"""Typer CLI entry point."""

from __future__ import annotations

from typing import Optional

import typer

from healthguard.config import Settings
from healthguard.errors import ReportValidationError, SnapshotError
from healthguard.ingestion.reports import build_case_report
from healthguard.models import OutbreakCluster, Village
from healthguard.service import DEFAULT_COMMENT_AUTHOR, SurveillanceService, build_service, open_repository
from healthguard.store.repository import VillageRepository
from healthguard.utils.logging import configure_logging, get_logger


app = typer.Typer(help="Village health surveillance CLI")
report_app = typer.Typer(help="Field report commands")
villages_app = typer.Typer(help="Village commands")
clusters_app = typer.Typer(help="Outbreak cluster commands")

app.add_typer(report_app, name="report")
app.add_typer(villages_app, name="villages")
app.add_typer(clusters_app, name="clusters")

logger = get_logger(__name__)


@app.callback()
def main() -> None:
    """Initialize logging for all commands."""
    settings = Settings()
    configure_logging(settings.log_level)


def _service() -> SurveillanceService:
    try:
        return build_service(Settings())
    except (SnapshotError, ValueError) as exc:
        logger.error("service.start.failed: %s", exc)
        typer.echo(f"Could not start: {exc}", err=True)
        raise typer.Exit(1)


def _repository() -> VillageRepository:
    """Open the village store without building oracles or detecting clusters."""
    try:
        return open_repository(Settings())
    except SnapshotError as exc:
        logger.error("store.open.failed: %s", exc)
        typer.echo(f"Could not open village store: {exc}", err=True)
        raise typer.Exit(1)


def _echo_village(village: Village, detailed: bool = False) -> None:
    typer.echo(
        f"{village.id}  {village.name} ({village.district})  "
        f"status={village.status.value}  cases={village.active_cases}  "
        f"pop={village.population}"
    )
    if not detailed:
        return

    typer.echo(f"  location: {village.coordinates.lat:.5f}, {village.coordinates.lng:.5f}")
    typer.echo(f"  last reported: {village.last_reported.isoformat()}")
    typer.echo(f"  reporter: {village.last_reporter_name or 'Unknown'}")
    symptoms = ", ".join(village.dominant_symptoms) or "None reported"
    typer.echo(f"  symptoms: {symptoms}")

    analysis = village.last_analysis
    if analysis is not None:
        typer.echo(f"  diagnosis: {analysis.possible_diagnosis}")
        typer.echo(f"  outbreak chance: {analysis.predicted_outbreak_chance:.0f}%")
        typer.echo(f"  reasoning: {analysis.reasoning}")
        for action in analysis.recommended_actions:
            typer.echo(f"  - {action}")

    for comment in village.comments:
        typer.echo(f"  [{comment.timestamp.isoformat()}] {comment.author}: {comment.text}")


def _echo_clusters(clusters: list[OutbreakCluster], service: SurveillanceService) -> None:
    if not clusters:
        typer.echo("No active outbreak clusters.")
        return

    for cluster in clusters:
        names = []
        for village_id in cluster.village_ids:
            village = service.repository.get(village_id)
            names.append(village.name if village is not None else village_id)
        typer.echo(
            f"{cluster.severity.value.upper()} cluster: {len(cluster.village_ids)} villages "
            f"({', '.join(names)}) center={cluster.center.lat:.4f},{cluster.center.lng:.4f} "
            f"radius={cluster.radius / 1000:g}km"
        )
        typer.echo(f'  AI plan: "{cluster.ai_advice}"')


@report_app.command("submit")
def report_submit(
    worker: str = typer.Option(..., help="Health worker name"),
    village: str = typer.Option(..., help="Village name"),
    symptoms: str = typer.Option(..., help="Comma-separated symptoms"),
    affected: int = typer.Option(..., min=1, help="Number of newly affected people"),
    location: str = typer.Option("", help="Worker GPS as 'lat, lng' (required for new villages)"),
    sanitation: str = typer.Option("Ok", help="Sanitation condition: Good, Ok or Worst"),
    disease: str = typer.Option("", help="Suspected disease (blank lets the oracle infer it)"),
    notes: str = typer.Option("", help="Free-text notes"),
) -> None:
    """Submit a field report and show the updated village."""
    service = _service()
    try:
        report = build_case_report(
            service.repository,
            worker_name=worker,
            village_name=village,
            symptoms=symptoms,
            affected_count=affected,
            worker_location=location,
            sanitation_status=sanitation,
            disease_type=disease,
            notes=notes,
        )
    except ReportValidationError as exc:
        typer.echo(f"Invalid report: {exc}", err=True)
        raise typer.Exit(1)

    updated = service.submit_report(report, village)
    _echo_village(updated, detailed=True)
    _echo_clusters(service.clusters, service)


@villages_app.command("list")
def villages_list() -> None:
    """List all villages."""
    for village in _repository().all():
        _echo_village(village)


@villages_app.command("show")
def villages_show(query: str = typer.Argument(..., help="Village id or name")) -> None:
    """Show one village by id, or by the first name that matches."""
    repository = _repository()
    village = repository.get(query) or repository.find_by_name(query)
    if village is None:
        typer.echo(f"Village not found: {query}", err=True)
        raise typer.Exit(1)
    _echo_village(village, detailed=True)


@villages_app.command("stats")
def villages_stats() -> None:
    """Show headline numbers across all villages."""
    summary = _repository().summary()
    typer.echo(f"villages: {summary.village_count}")
    typer.echo(f"total active cases: {summary.total_active_cases}")
    typer.echo(f"red zones: {summary.red_zones}")
    typer.echo(f"yellow zones: {summary.yellow_zones}")


@villages_app.command("comment")
def villages_comment(
    village_id: str = typer.Argument(..., help="Village id"),
    text: str = typer.Option(..., help="Comment text"),
    author: Optional[str] = typer.Option(None, help="Comment author"),
) -> None:
    """Add a public comment to a village."""
    service = _service()
    comment = service.add_comment(village_id, text, author=author or DEFAULT_COMMENT_AUTHOR)
    if comment is None:
        typer.echo("Comment not added (unknown village or empty text).", err=True)
        raise typer.Exit(1)
    typer.echo(f"Comment {comment.id} added to {village_id}.")


@clusters_app.command("list")
def clusters_list() -> None:
    """Recompute and list outbreak clusters."""
    service = _service()
    _echo_clusters(service.clusters, service)


if __name__ == "__main__":
    app()
