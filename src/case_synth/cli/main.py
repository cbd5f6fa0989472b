"""CLI for case-synth: create / list-types / seed commands.

Exit codes: 0 when every requested case was created, 1 on error,
3 when a batch created fewer cases than requested.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from case_synth.case_types.registry import build_registry
from case_synth.core.config import AppSettings, ContentConfig, ObservabilityConfig, PersistenceConfig
from case_synth.core.startup_checks import validate_settings
from case_synth.exceptions import CaseSynthError
from case_synth.hooks.logging_config import setup_logging
from case_synth.persistence.factory import create_record_store
from case_synth.services.orchestrator import build_orchestrator

app = typer.Typer(name="case-synth", help="Synthesize test cases into a record store")
console = Console()

EXIT_PARTIAL = 3


def _build_settings(
    store_path: Optional[Path],
    backend: Optional[str],
    content_backend: Optional[str],
    verbose: bool,
) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    overrides: dict = {}
    if store_path or backend:
        persistence: dict = settings.persistence.model_dump()
        if store_path:
            persistence["store_path"] = store_path
        if backend:
            persistence["backend"] = backend
        overrides["persistence"] = PersistenceConfig(**persistence)
    if content_backend:
        overrides["content"] = ContentConfig(
            **{**settings.content.model_dump(), "backend": content_backend}
        )
    if verbose:
        overrides["observability"] = ObservabilityConfig(
            **{**settings.observability.model_dump(), "log_level": "DEBUG"}
        )
    return settings.model_copy(update=overrides)


def _parse_fields(pairs: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        fields[key.strip()] = value
    return fields


@app.command()
def create(
    case_type: str = typer.Argument(..., help="Case type id, e.g. incident or healthcare_claim"),
    short_description: Optional[str] = typer.Option(
        None, "--short-description", "-d", help="Short description (required for some types)"
    ),
    num_cases: int = typer.Option(1, "--num-cases", "-n", help="Number of cases (batchable types only)"),
    store_path: Optional[Path] = typer.Option(None, "--store-path", help="Directory for the file store"),
    backend: Optional[str] = typer.Option(None, "--backend", help="Record store backend: file or memory"),
    content_backend: Optional[str] = typer.Option(
        None, "--content", help="Text generator: litellm or template"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Create one case, or a batch for batchable types."""
    try:
        settings = _build_settings(store_path, backend, content_backend, verbose)
    except ValidationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1)
    setup_logging(settings.observability)

    registry = build_registry(
        settings.synthesis.batch_overrides,
        settings.synthesis.short_description_overrides,
    )
    try:
        validate_settings(settings, registry)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1)

    orchestrator = build_orchestrator(settings, registry=registry)
    result = orchestrator.create_case(case_type, short_description, num_cases)

    if result.error is not None:
        console.print(f"[red]{result.error.code}[/red] ({result.error.stage.value}): {result.error.message}")
        raise typer.Exit(code=1)

    table = Table(title=f"{case_type}: run {result.run_id}")
    table.add_column("#", justify="right")
    table.add_column("Record id")
    for i, record_id in enumerate(result.record_ids, start=1):
        table.add_row(str(i), record_id)
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")
    for failure in result.failures:
        console.print(
            f"[red]unit {failure.index + 1} failed[/red] ({failure.error.code}): {failure.error.message}"
        )

    if result.is_partial:
        console.print(f"[yellow]Created {len(result.record_ids)} of {result.requested}[/yellow]")
        raise typer.Exit(code=EXIT_PARTIAL)


@app.command("list-types")
def list_types() -> None:
    """Show registered case types."""
    settings = AppSettings()
    registry = build_registry(
        settings.synthesis.batch_overrides,
        settings.synthesis.short_description_overrides,
    )

    table = Table(title="Case types")
    table.add_column("Id", style="bold")
    table.add_column("Name")
    table.add_column("Collection")
    table.add_column("Short description")
    table.add_column("Batch")
    table.add_column("Notes", justify="right")
    for schema in registry.list_case_types():
        table.add_row(
            schema.id,
            schema.display_name,
            schema.target_collection,
            "required" if schema.requires_short_description else "optional",
            "yes" if schema.allows_batch else "no",
            str(len(schema.annotation_plan)),
        )
    console.print(table)


@app.command()
def seed(
    collection: str = typer.Argument(..., help="Collection to seed, e.g. sn_hcls_patient"),
    field: List[str] = typer.Option(..., "--field", "-f", help="key=value; repeat for more fields"),
    count: int = typer.Option(1, "--count", "-c", min=1),
    store_path: Optional[Path] = typer.Option(None, "--store-path"),
) -> None:
    """Insert reference records (patients, CIs) that lookups can pick from."""
    settings = _build_settings(store_path, None, None, False)
    setup_logging(settings.observability)
    store = create_record_store(settings)
    fields = _parse_fields(field)

    for _ in range(count):
        try:
            record_id = store.insert(collection, fields)
        except CaseSynthError as e:
            console.print(f"[red]{e.code}[/red]: {e}")
            raise typer.Exit(code=1)
        console.print(f"[green]{collection}[/green] {record_id}")
