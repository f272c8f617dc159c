"""BoviSense CLI application using Typer.

``serve`` runs the classification proxy; ``classify`` sends local images
through it and renders the results.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import httpx
import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bovisense.client.files import ImageFile
from bovisense.client.history import export_result
from bovisense.client.session import ClassificationSession, ProxyClient
from bovisense.config import get_settings
from bovisense.main import LOG_FORMAT

if TYPE_CHECKING:
    from bovisense.client.history import ClassificationHistory, ClassificationResult
    from bovisense.client.notifications import Notification

app = typer.Typer(
    name="bovisense",
    help="BoviSense - cattle vs buffalo image classifier",
    no_args_is_help=True,
)
console = Console()


class ConsoleNotifier:
    """Prints notifications the way the web UI would show toasts."""

    def __init__(self, target: Console) -> None:
        self._console = target

    def notify(self, notification: Notification) -> None:
        style = "bold red" if notification.destructive else "bold green"
        self._console.print(f"[{style}]{notification.title}[/{style}]: {escape(notification.description)}")


def render_result(result: ClassificationResult) -> None:
    console.print(f"\n[bold]Prediction:[/bold] [cyan]{result.prediction.value.upper()}[/cyan]")
    console.print(f"[bold]Confidence:[/bold] {result.confidence * 100:.1f}%")
    if result.is_high_confidence:
        console.print("[green]High confidence - reliable classification[/green]")
    else:
        console.print("[yellow]Moderate confidence - please verify[/yellow]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Cattle Indicators")
    table.add_column("Buffalo Indicators")
    cattle, buffalo = result.features.cattle, result.features.buffalo
    for i in range(max(len(cattle), len(buffalo))):
        table.add_row(
            f"• {escape(cattle[i])}" if i < len(cattle) else "",
            f"• {escape(buffalo[i])}" if i < len(buffalo) else "",
        )
    console.print(table)


def render_history(history: ClassificationHistory) -> None:
    table = Table(title=f"History ({len(history)})", show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Prediction")
    table.add_column("Confidence", justify="right")
    table.add_column("When")
    table.add_column("Cattle", justify="right")
    table.add_column("Buffalo", justify="right")
    for result in history:
        table.add_row(
            result.id,
            result.prediction.value.upper(),
            f"{result.confidence * 100:.1f}%",
            result.submitted_at.astimezone().strftime("%b %d, %Y at %I:%M %p"),
            f"{len(result.features.cattle)} features",
            f"{len(result.features.buffalo)} features",
        )
    console.print(table)


async def _run_batch(files: list[ImageFile], endpoint: str, api_key: str | None) -> ClassificationSession:
    async with httpx.AsyncClient(timeout=httpx.Timeout(get_settings().gateway_timeout)) as client:
        session = ClassificationSession(ProxyClient(client, endpoint, api_key), notifier=ConsoleNotifier(console))
        await session.classify_batch(files)
    return session


def _describe(paths: list[Path]) -> list[ImageFile]:
    files: list[ImageFile] = []
    for path in paths:
        if not path.is_file():
            console.print(f"[bold red]Invalid file[/bold red]: {escape(path.name)} does not exist")
            continue
        files.append(ImageFile.from_path(path))
    return files


@app.command("classify")
def classify(
    paths: Annotated[list[Path], typer.Argument(help="Image files to classify")],
    endpoint: Annotated[str | None, typer.Option(help="Classification endpoint URL")] = None,
    export_dir: Annotated[
        Path | None, typer.Option("--export-dir", help="Write each result as JSON into this directory")
    ] = None,
) -> None:
    """Classify images as cattle or buffalo, one after another."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    files = _describe(paths)
    session = asyncio.run(_run_batch(files, endpoint or settings.proxy_url, settings.api_key))
    history = session.history
    if len(history) == 0:
        console.print("[bold red]No images were classified[/bold red]")
        raise typer.Exit(code=1)

    # History is newest first; show results in submission order.
    for result in reversed(history.results):
        render_result(result)
        if export_dir is not None:
            path = export_result(result, export_dir)
            console.print(f"Saved [cyan]{path}[/cyan]")
    render_history(history)


@app.command("serve")
def serve(
    host: Annotated[str | None, typer.Option(help="Bind address")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port")] = None,
) -> None:
    """Run the classification proxy."""
    settings = get_settings()
    uvicorn.run(
        "bovisense.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
