"""Reading Assessment Runner."""

import os
import traceback
from pathlib import Path

import typer
from loguru import logger

from reading_pyutils.errors import ReadingError
from src.reading_assessment.config import AssessmentConfig, load_config
from src.reading_assessment.constants import DEFAULT_SERVICE_NAME
from src.reading_assessment.core.processor import analyze_reading
from src.reading_assessment.models import AnalysisReport
from src.reading_assessment.utils.file_operations import (
    load_reference_file,
    report_to_json,
    write_report,
)
from src.reading_assessment.utils.logging import setup_logging
from src.reading_assessment.utils.transcription import load_transcript_file

app: typer.Typer = typer.Typer(
    help="Compare a read-aloud transcript against its reference text", no_args_is_help=True
)


def run_analysis(
    *, reference_path: Path, transcript_path: Path, config: AssessmentConfig
) -> AnalysisReport:
    """Load both inputs and analyze the reading.

    Args:
        reference_path: Reference text or JSON word list.
        transcript_path: Transcript JSON.
        config: Configuration object.

    Returns:
        The analysis report.
    """
    reference = load_reference_file(
        reference_path, drop_punctuation=config.drop_punctuation_reference
    )
    spoken = load_transcript_file(transcript_path)
    logger.info(
        f"Loaded {len(reference)} reference words from {reference_path} "
        f"and {len(spoken)} spoken words from {transcript_path}"
    )
    return analyze_reading(reference, spoken)


@app.command()
def analyze(
    reference: Path = typer.Argument(..., help="Reference text file or JSON word list"),
    transcript: Path = typer.Argument(..., help="Transcript JSON file"),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON report to this file instead of stdout",
        show_default=False,
    ),
    config_path: str = typer.Option(
        None,
        "--config",
        help="Path to configuration YAML file",
        show_default=False,
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output logs in JSON format instead of human-readable format",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not print the summary line",
    ),
) -> None:
    """Analyze one reading and report its errors."""
    if json_logs:
        os.environ["LOG_JSON"] = "true"

    try:
        config = load_config(config_path=config_path)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)

    setup_logging(config=config, service=DEFAULT_SERVICE_NAME, use_stdout=False)

    try:
        report = run_analysis(reference_path=reference, transcript_path=transcript, config=config)
    except (ReadingError, OSError) as e:
        logger.error(f"Analysis failed: {e}")
        logger.debug(traceback.format_exc())
        typer.echo(f"Analysis failed: {e}", err=True)
        raise typer.Exit(1)

    if output is not None:
        try:
            write_report(
                report,
                output,
                indent=config.report_indent,
                include_cleaned_transcript=config.include_cleaned_transcript,
            )
        except OSError as e:
            logger.error(f"Failed to write report: {e}")
            typer.echo(f"Failed to write report: {e}", err=True)
            raise typer.Exit(1)
    else:
        typer.echo(
            report_to_json(
                report,
                indent=config.report_indent,
                include_cleaned_transcript=config.include_cleaned_transcript,
            ).decode("utf-8")
        )

    if not quiet:
        typer.echo(report.summary(), err=output is None)


if __name__ == "__main__":
    app()
