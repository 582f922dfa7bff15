"""Command-line interface for the mindful session extractor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import ExtractorSettings
from .dialogs import CANCELLED_MESSAGE, CONFIRM_MESSAGE, EMPTY_MESSAGE
from .errors import MindfulExportError
from .models import ExtractionResult, ExtractionStatus
from .paths import get_default_output_path, get_documents_dir
from .pipeline import run_extraction

logger = logging.getLogger(__name__)

app = typer.Typer(help="Extract Apple Health mindful sessions for Bloom.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _run_or_exit(
    input_path: Path, output: Optional[Path], settings: ExtractorSettings
) -> ExtractionResult:
    try:
        return run_extraction(input_path, output, settings)
    except MindfulExportError as exc:
        typer.secho(f"Error extracting Mindful Sessions: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def extract(
    input_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Apple Health export.xml."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="CSV destination. Defaults to bloom-data-ah.csv in your documents folder.",
    ),
    skip_bad_timestamps: bool = typer.Option(
        False,
        "--skip-bad-timestamps",
        help="Skip sessions with unreadable timestamps instead of aborting.",
    ),
    keep_zero_minutes: bool = typer.Option(
        False,
        "--keep-zero-minutes",
        help="Also export sessions shorter than one minute.",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Write every mindful session in INPUT_PATH to a Bloom import CSV."""
    if not yes and not typer.confirm(CONFIRM_MESSAGE, default=True):
        typer.echo(CANCELLED_MESSAGE)
        raise typer.Exit()

    settings = ExtractorSettings.from_options(
        skip_bad_timestamps=skip_bad_timestamps, keep_zero_minutes=keep_zero_minutes
    )
    destination = output or get_default_output_path(settings.output_name)
    result = _run_or_exit(input_path, destination, settings)
    if result.status is ExtractionStatus.EMPTY:
        typer.echo(EMPTY_MESSAGE)
        return

    typer.echo("Mindful Session extraction successful!\n")
    typer.echo(result.summary, nl=False)
    typer.echo(f"\nWrote {result.exported_rows} rows to {result.destination}")
    typer.echo(
        f"Upload {Path(destination).name} to the #meditation-tracking channel and use "
        "/import to import the data into Bloom."
    )


@app.command()
def summary(
    input_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Apple Health export.xml."
    ),
    skip_bad_timestamps: bool = typer.Option(
        False,
        "--skip-bad-timestamps",
        help="Skip sessions with unreadable timestamps instead of aborting.",
    ),
) -> None:
    """Print how many mindful sessions each app recorded."""
    settings = ExtractorSettings.from_options(skip_bad_timestamps=skip_bad_timestamps)
    result = _run_or_exit(input_path, None, settings)
    if result.status is ExtractionStatus.EMPTY:
        typer.echo(EMPTY_MESSAGE)
        return
    typer.echo(result.summary, nl=False)


@app.command()
def gui() -> None:
    """Run the dialog-driven extraction."""
    from .dialogs import TkDialogService, run_interactive

    result = run_interactive(TkDialogService(), initial_dir=get_documents_dir())
    if result is None:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the server."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the server."
    ),
    skip_bad_timestamps: bool = typer.Option(
        False,
        "--skip-bad-timestamps",
        help="Skip sessions with unreadable timestamps on every request.",
    ),
    keep_zero_minutes: bool = typer.Option(
        False,
        "--keep-zero-minutes",
        help="Also export sessions shorter than one minute.",
    ),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level."),
) -> None:
    """Serve the upload endpoint on a local port."""
    import uvicorn

    from .webapp import create_app

    settings = ExtractorSettings.from_options(
        skip_bad_timestamps=skip_bad_timestamps, keep_zero_minutes=keep_zero_minutes
    )
    logger.info(
        "POST an export.xml to http://%s:%d/api/extract (or /api/extract.csv for the file).",
        host,
        port,
    )
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_level=log_level)
