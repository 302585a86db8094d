from __future__ import annotations

from pathlib import Path
from typing import get_args

import typer
import yaml
from pydantic import ValidationError

from widget_export.config import DEFAULT_CONFIG_PATH, AppConfig, HeaderMode, load_config
from widget_export.errors import EncodingError, ExportError, NoDataError
from widget_export.io.snapshot import Snapshot, load_snapshot
from widget_export.logging import configure_logging
from widget_export.pipeline.export import build_export_table, run_export
from widget_export.serialize.encoders import CSV_FIELD_SEPARATOR, SUPPORTED_FORMATS

app = typer.Typer(no_args_is_help=True, add_completion=False)

EXPORT_FAILED_EXIT_CODE = 1
NO_DATA_EXIT_CODE = 3
ENCODING_EXIT_CODE = 4


def _load_app_config(config_path: Path) -> AppConfig:
    # The shipped default is optional; an explicitly passed file must exist.
    if not config_path.is_file():
        if config_path == DEFAULT_CONFIG_PATH.resolve():
            return load_config(None)
        raise typer.BadParameter(f"Config file not found: {config_path}", param_hint="--config")
    try:
        return load_config(config_path)
    except (ValidationError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _load_snapshot(snapshot_path: Path) -> Snapshot:
    try:
        return load_snapshot(snapshot_path)
    except (ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="SNAPSHOT") from exc


def _validate_header_mode(header_mode: str | None) -> HeaderMode | None:
    if header_mode is None:
        return None
    allowed = get_args(HeaderMode)
    if header_mode not in allowed:
        raise typer.BadParameter(
            f"Expected one of {', '.join(allowed)}", param_hint="--header-mode"
        )
    return header_mode  # type: ignore[return-value]


@app.command()
def export(
    snapshot: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True),
    fmt: str | None = typer.Option(
        None, "--format", help=f"Output format: {', '.join(SUPPORTED_FORMATS)}."
    ),
    title: str | None = typer.Option(None, help="Filename prefix; defaults to the snapshot title."),
    out: Path | None = typer.Option(None, resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, resolve_path=True),
    header_mode: str | None = typer.Option(
        None, help="Header derivation: first_source or union."
    ),
    log_level: str = typer.Option("INFO"),
) -> None:
    """Build the export table from a snapshot and write it to a CSV or XLSX file."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    data = _load_snapshot(snapshot)
    mode = _validate_header_mode(header_mode)
    try:
        path = run_export(data, cfg, out_dir=out, fmt=fmt, title=title, header_mode=mode)
    except NoDataError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=NO_DATA_EXIT_CODE) from exc
    except EncodingError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ENCODING_EXIT_CODE) from exc
    except ExportError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXPORT_FAILED_EXIT_CODE) from exc
    typer.echo(f"Export written to: {path}")


@app.command()
def preview(
    snapshot: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True),
    limit: int = typer.Option(10, min=0, help="Maximum number of data rows to print."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, resolve_path=True),
    header_mode: str | None = typer.Option(None),
    log_level: str = typer.Option("WARNING"),
) -> None:
    """Print the formatted export table without writing a file."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    table = build_export_table(
        _load_snapshot(snapshot), cfg, header_mode=_validate_header_mode(header_mode)
    )
    for row in table.grid()[: limit + 1]:
        typer.echo(CSV_FIELD_SEPARATOR.join(str(cell) for cell in row))
    typer.echo(f"({table.row_count} rows)")


@app.command()
def formats() -> None:
    """List supported export formats."""
    for token in SUPPORTED_FORMATS:
        typer.echo(token)
