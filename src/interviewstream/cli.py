"""Typer CLI entrypoint for consuming a generation stream."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .client import StreamOutcome
from .config import load_config_file
from .container import create_container
from .logging import configure_logging
from .schemas import AppConfig, StreamState
from .transcript import TranscriptLogger

app = typer.Typer(help="Interview generation stream client.")

_EXIT_CODES: dict[str, int] = {"completed": 0, "ended": 0, "failed": 1, "cancelled": 130}


@app.command()
def stream(
    url: str = typer.Argument(..., help="Endpoint URL, or a path relative to client.base_url."),
    method: Optional[str] = typer.Option(None, help="HTTP method (defaults to the configured method, POST)."),
    header: list[str] = typer.Option([], "--header", "-H", help="Extra request header as 'Name: value'."),
    body: Optional[str] = typer.Option(None, help="JSON request body."),
    body_file: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Path to a JSON request body."
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    transcript: Optional[Path] = typer.Option(None, dir_okay=False, help="Transcript output (JSONL)."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Stream a generation endpoint and print its final content."""
    app_config = AppConfig()
    if config:
        try:
            app_config = load_config_file(config)
        except (ValidationError, yaml.YAMLError) as exc:
            raise typer.BadParameter(f"Invalid config file: {exc}", param_name="config") from exc

    if body is not None and body_file is not None:
        raise typer.BadParameter("Use either --body or --body-file, not both", param_name="body")
    payload = _load_body(body, body_file)
    headers = _parse_headers(header)

    configure_logging(log_level)

    container = create_container(settings=app_config.to_settings())
    if transcript:
        controller = container.controller(transcript=TranscriptLogger(transcript))
    else:
        controller = container.controller()

    controller.add_listener(_ProgressPrinter())

    state = StreamState()
    try:
        outcome, state = asyncio.run(
            _run(controller, url, method=method, headers=headers, body=payload)
        )
    except KeyboardInterrupt:
        outcome = "cancelled"

    if outcome == "failed":
        typer.echo(f"Error: {state.error}", err=True)
    elif outcome == "cancelled":
        typer.echo("Stream cancelled.", err=True)
    elif state.content is not None:
        typer.echo(state.content)

    raise typer.Exit(code=_EXIT_CODES[outcome])


async def _run(controller, url: str, **options: Any) -> tuple[StreamOutcome, StreamState]:
    async with controller:
        outcome = await controller.start_stream(url, **options)
        # Closing resets the controller, so capture the final snapshot first.
        return outcome, controller.state


class _ProgressPrinter:
    """Echo progress hints to stderr as they change."""

    def __init__(self) -> None:
        self._last: float | None = None

    def __call__(self, state: StreamState) -> None:
        if state.is_streaming and state.progress is not None and state.progress != self._last:
            self._last = state.progress
            typer.echo(f"progress: {state.progress:g}%", err=True)


def _load_body(body: str | None, body_file: Path | None) -> Any:
    if body_file is not None:
        body = body_file.read_text(encoding="utf-8")
    if body is None:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Request body is not valid JSON: {exc}", param_name="body") from exc


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value': {value!r}", param_name="header")
        headers[name.strip()] = content.strip()
    return headers


def main() -> None:
    app()


if __name__ == "__main__":
    main()
