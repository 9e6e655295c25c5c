"""CLI commands for collecting playlist IDs, resolving durations, and building master playlists."""

from __future__ import annotations

import asyncio
import json
import random
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table

from playpack.config.settings import Settings, get_settings
from playpack.models.segment import Bucket, MasterPlaylist, Segment
from playpack.services.playlist import PlaylistService, PlaylistSession
from playpack.services.youtube_api import ApiCallCounter, MissingApiKeyError, NetworkError, YouTubeDataClient
from playpack.utils.progress import ProgressHandler, ProgressUpdate
from playpack.utils.validation import InvalidPlaylistURLError, extract_playlist_id

ResultT = TypeVar("ResultT")
Operation = Callable[[PlaylistService, PlaylistSession, Optional[ProgressHandler]], Awaitable[ResultT]]

EXPORT_TEMPLATE = "export const masterPlaylist = {payload};\n"


class PlaylistExitCode:
    """Mapping of meaningful CLI exit codes."""

    SUCCESS = 0
    INVALID_INPUT = 1
    NETWORK_ERROR = 3
    PROCESSING_ERROR = 4


def register(app: typer.Typer, console: Console) -> None:
    """Register the playlist commands on ``app``."""

    def run_operation(
        operation: Operation[ResultT],
        *,
        url: str,
        api_key: Optional[str],
        quiet: bool,
    ) -> tuple[PlaylistSession, ResultT, int]:
        counter = ApiCallCounter()
        service_console = Console(stderr=True, quiet=True) if quiet else console

        try:
            settings = get_settings()
            key = _resolve_api_key(api_key, settings)
            extract_playlist_id(url)
            if not key:
                raise MissingApiKeyError("A YouTube API key is required (set YOUTUBE_API_KEY or pass --api-key).")

            async def _execute(progress_callback: Optional[ProgressHandler]) -> tuple[PlaylistSession, ResultT]:
                session = PlaylistSession(playlist_url=url)
                async with YouTubeDataClient(key, settings=settings, console=service_console, counter=counter) as client:
                    service = PlaylistService(client, settings=settings, console=service_console)
                    return session, await operation(service, session, progress_callback)

            if quiet:
                session, result = asyncio.run(_execute(None))
            else:
                progress = Progress(
                    SpinnerColumn(),
                    TextColumn("{task.description}"),
                    TextColumn("{task.completed:>5.0f} items"),
                    console=console,
                    transient=True,
                )
                with progress as running_progress:
                    task_id = running_progress.add_task("Starting...", total=None)
                    session, result = asyncio.run(_execute(_progress_handler_factory(running_progress, task_id)))
        except (InvalidPlaylistURLError, MissingApiKeyError) as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=PlaylistExitCode.INVALID_INPUT) from exc
        except ValidationError as exc:
            console.print(f"[red]Error:[/red] Invalid configuration\n{escape(str(exc))}")
            raise typer.Exit(code=PlaylistExitCode.INVALID_INPUT) from exc
        except NetworkError as exc:
            console.print(f"[red]Network error:[/red] {exc}")
            console.print(f"API calls: {counter.count}")
            raise typer.Exit(code=PlaylistExitCode.NETWORK_ERROR) from exc
        except Exception as exc:
            console.print(f"[red]Unexpected error:[/red] {exc}")
            raise typer.Exit(code=PlaylistExitCode.PROCESSING_ERROR) from exc

        return session, result, counter.count

    @app.command("fetch-ids")
    def fetch_ids(
        url: str = typer.Argument(..., help="YouTube playlist URL (or bare playlist ID)"),
        api_key: Optional[str] = typer.Option(None, "--api-key", help="YouTube Data API key"),
        json_output: bool = typer.Option(False, "--json", help="Output video IDs as JSON"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress interactive output"),
    ) -> None:
        async def operation(
            service: PlaylistService, session: PlaylistSession, progress_callback: Optional[ProgressHandler]
        ) -> None:
            await service.fetch_video_ids(session, on_progress=progress_callback)

        session, _, api_calls = run_operation(operation, url=url, api_key=api_key, quiet=quiet or json_output)

        if json_output:
            payload = {
                "playlist_id": session.playlist_id,
                "available": session.available_video_ids,
                "unavailable": session.unavailable_video_ids,
                "api_calls": api_calls,
            }
            typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
            return

        console.print(_build_id_panel("Available Video IDs", session.available_video_ids, "green"))
        console.print(_build_id_panel("Unavailable Video IDs", session.unavailable_video_ids, "yellow"))
        console.print(f"API calls: {api_calls}")

    @app.command("fetch-durations")
    def fetch_durations(
        url: str = typer.Argument(..., help="YouTube playlist URL (or bare playlist ID)"),
        api_key: Optional[str] = typer.Option(None, "--api-key", help="YouTube Data API key"),
        json_output: bool = typer.Option(False, "--json", help="Output segments as JSON"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress interactive output"),
    ) -> None:
        async def operation(
            service: PlaylistService, session: PlaylistSession, progress_callback: Optional[ProgressHandler]
        ) -> list[Segment]:
            return await service.fetch_video_durations(session, on_progress=progress_callback)

        _, segments, api_calls = run_operation(operation, url=url, api_key=api_key, quiet=quiet or json_output)

        if json_output:
            payload = {
                "segments": [segment.model_dump(mode="json", by_alias=True) for segment in segments],
                "api_calls": api_calls,
            }
            typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
            return

        console.print(_build_segment_table("Video Timeline", segments))
        console.print(f"API calls: {api_calls}")

    @app.command("build-master")
    def build_master(  # pylint: disable=too-many-arguments
        url: str = typer.Argument(..., help="YouTube playlist URL (or bare playlist ID)"),
        api_key: Optional[str] = typer.Option(None, "--api-key", help="YouTube Data API key"),
        seed: Optional[int] = typer.Option(None, "--seed", help="Seed for a reproducible shuffle"),
        output: Optional[Path] = typer.Option(
            None, "--output", "-o", dir_okay=False, help="Write the master playlist as a JavaScript module"
        ),
        json_output: bool = typer.Option(False, "--json", help="Output the master playlist as JSON"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress interactive output"),
    ) -> None:
        rng = random.Random(seed)

        async def operation(
            service: PlaylistService, session: PlaylistSession, progress_callback: Optional[ProgressHandler]
        ) -> MasterPlaylist:
            return await service.build_master_playlist(session, rng=rng, on_progress=progress_callback)

        _, master, api_calls = run_operation(operation, url=url, api_key=api_key, quiet=quiet or json_output)

        if output is not None:
            try:
                write_export(master, output)
            except OSError as exc:
                console.print(f"[red]Could not write {output}:[/red] {exc}")
                raise typer.Exit(code=PlaylistExitCode.PROCESSING_ERROR) from exc

        if json_output:
            payload = {"buckets": master.to_export_payload(), "api_calls": api_calls}
            typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
            return

        if not master.buckets:
            console.print("[yellow]No available videos to pack.[/yellow]")
        for index, bucket in enumerate(master.buckets, start=1):
            console.print(_build_bucket_table(index, bucket))
        console.print(f"Buckets: {len(master)} | Videos placed: {master.item_count} | API calls: {api_calls}")
        if output is not None:
            console.print(f"Saved master playlist to [bold]{output}[/bold]")


def write_export(master: MasterPlaylist, path: Path) -> Path:
    """Write ``master`` as an ES module exporting ``masterPlaylist``."""

    payload = json.dumps(master.to_export_payload(), ensure_ascii=False, indent=2)
    path.write_text(EXPORT_TEMPLATE.format(payload=payload), encoding="utf-8")
    return path


def _resolve_api_key(api_key: Optional[str], settings: Settings) -> str:
    if api_key:
        return api_key.strip()
    if settings.youtube_api_key is not None:
        return settings.youtube_api_key.get_secret_value().strip()
    return ""


def _progress_handler_factory(progress: Progress, task_id: TaskID) -> ProgressHandler:
    def handler(update: ProgressUpdate) -> None:
        label = update.stage.value.replace("_", " ").title()
        progress.update(
            task_id,
            completed=update.processed,
            total=update.total,
            description=f"{label}... {update.message}",
        )

    return handler


def format_offset(seconds: int) -> str:
    """Render a second count as ``H:MM:SS``."""

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def _build_id_panel(title: str, video_ids: Sequence[str], border_style: str) -> Panel:
    body = "\n".join(video_ids) if video_ids else "<none>"
    return Panel.fit(body, title=f"{title} ({len(video_ids)})", border_style=border_style)


def _build_segment_table(title: str, segments: Sequence[Segment]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Video ID")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Duration", justify="right")

    for position, segment in enumerate(segments, start=1):
        table.add_row(
            str(position),
            segment.video_id,
            format_offset(segment.start_offset),
            format_offset(segment.end_offset),
            format_offset(segment.duration),
        )
    return table


def _build_bucket_table(index: int, bucket: Bucket) -> Table:
    return _build_segment_table(
        f"Playlist {index} ({len(bucket)} videos, {format_offset(bucket.total_duration)})",
        bucket.segments,
    )


__all__ = ["EXPORT_TEMPLATE", "PlaylistExitCode", "format_offset", "register", "write_export"]
