"""Command line interface for Textcast."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from textcast.config import AppConfig
from textcast.errors import ChunkingImpossible
from textcast.models import ContentRecord
from textcast.pipeline import Pipeline
from textcast.publish.storage import GCSObjectStore
from textcast.synthesis.backend import GoogleTTSBackend
from textcast.utils.files import object_name_for
from textcast.utils.text import chunk_text, snippet


console = Console()
app = typer.Typer(help="Textcast - turn articles into podcast audio")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_config(config_path: Optional[Path]) -> AppConfig:
    if config_path is None:
        return AppConfig()
    if not config_path.exists():
        raise typer.BadParameter(f"Config file not found: {config_path}")
    try:
        return AppConfig.from_file(config_path)
    except (ValueError, TypeError) as exc:
        raise typer.BadParameter(f"Invalid config file {config_path}: {exc}") from exc


def load_record(path: Path, *, encoded: bool = False) -> ContentRecord:
    """Read a content record from a JSON file, optionally base64 encoded."""
    raw = path.read_bytes()
    if encoded:
        try:
            raw = base64.b64decode(raw.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise typer.BadParameter(f"{path} is not valid base64: {exc}") from exc
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"{path} is not a JSON content record: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object")
    try:
        return ContentRecord.from_dict(payload)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def synthesize(
    record_path: Path = typer.Argument(..., help="JSON content record to convert.", exists=True),
    config_path: Path = typer.Option(None, "--config", "-c", help="JSON configuration file"),
    bucket: str = typer.Option(None, "--bucket", help="Storage bucket for the audio"),
    char_limit: int = typer.Option(None, "--char-limit", help="Maximum characters per synthesis call"),
    concurrency: int = typer.Option(None, "--concurrency", help="Parallel synthesis requests"),
    encoded: bool = typer.Option(False, "--base64", help="Record file is base64 encoded"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Convert a content record to audio and publish it."""
    _setup_logging(verbose)
    config = _load_config(config_path)
    if bucket is not None:
        config.store_bucket = bucket
    if char_limit is not None:
        config.tts_char_limit = char_limit
    if concurrency is not None:
        config.max_concurrency = concurrency
    if config.tts_char_limit <= 0 or config.max_concurrency < 1:
        raise typer.BadParameter("--char-limit and --concurrency must be positive")
    if not config.store_bucket:
        raise typer.BadParameter("A storage bucket is required (--bucket or config file)")

    record = load_record(record_path, encoded=encoded)
    pipeline = Pipeline.from_config(
        config,
        GoogleTTSBackend(config.voice),
        GCSObjectStore(config.store_bucket, timeout=config.upload_timeout),
    )

    console.print(f"Converting [bold]{record.source_url}[/bold]...")
    outcome = pipeline.run(record)
    if not outcome.ok:
        console.print(f"[red]{outcome.error_kind.value}[/red]: {outcome.message}")
        raise typer.Exit(code=1)

    console.print(f"Published [bold]{outcome.published.object_name}[/bold] ({outcome.chunk_count} chunks)")
    if outcome.published.url:
        console.print(outcome.published.url)
    if not outcome.cleanup_ok:
        console.print("[yellow]Warning: working directory was not removed.[/yellow]")


@app.command()
def chunks(
    record_path: Path = typer.Argument(..., help="JSON content record to split.", exists=True),
    char_limit: int = typer.Option(AppConfig().tts_char_limit, "--char-limit", help="Maximum characters per chunk"),
    encoded: bool = typer.Option(False, "--base64", help="Record file is base64 encoded"),
) -> None:
    """Preview how a content record would be split for synthesis."""
    if char_limit <= 0:
        raise typer.BadParameter("--char-limit must be positive")
    record = load_record(record_path, encoded=encoded)
    try:
        planned = chunk_text(record.text, char_limit)
    except ChunkingImpossible as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Chunk")
    table.add_column("Chars")
    table.add_column("Snippet")
    for chunk in planned:
        table.add_row(str(chunk.index), str(len(chunk.text)), snippet(chunk.text))

    console.print(table)
    console.print(f"{len(planned)} chunks for {len(record.text)} characters")


@app.command("object-name")
def object_name(
    url: str = typer.Argument(..., help="Source url"),
    extension: str = typer.Option(".mp3", help="Audio file extension"),
) -> None:
    """Print the storage object name used for a source url."""
    console.print(object_name_for(url, extension))
