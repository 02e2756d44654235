import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Config, configure_logging
from .core import Tool
from .tools.stance.sources import SensorUnavailableError, TrackingMode
from .tools.stance_analyzer import StanceAnalyzer

app = typer.Typer(help="Stance checker for depth-camera skeleton streams.")
console = Console()

VERDICT_STYLES = {"correct": "green", "close": "yellow", "incorrect": "red"}


@app.callback()
def _setup(log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL.")):
    if log_level:
        Config.LOG_LEVEL = log_level
    try:
        Config.validate()
    except ValueError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(code=2)
    configure_logging()


def _verdict_cell(evaluations) -> str:
    if not evaluations:
        return "[dim]-[/dim]"
    cells = []
    for ev in evaluations:
        name = ev["verdict"].value
        cells.append(f"[{VERDICT_STYLES[name]}]{name.upper()}[/{VERDICT_STYLES[name]}]")
    return ", ".join(cells)


def _flags(evaluations) -> str:
    if not evaluations:
        return ""
    ev = evaluations[0]
    return " ".join(
        f"{label}={'Y' if ev[key] else 'N'}"
        for label, key in (("arms", "arms_aligned"), ("together", "legs_together"), ("apart", "legs_apart"))
    )


@app.command()
def replay(
    path: str = typer.Argument(..., help="Recorded skeleton stream (JSON)."),
    seated: bool = typer.Option(Config.SEATED_MODE, "--seated/--standing", help="Seated tracking mode."),
    show: bool = typer.Option(False, "--show/--no-show", help="Show the overlay window."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the overlay to an MP4 file."),
):
    """Check every frame of a recording against the two stances."""
    analyzer: Tool = StanceAnalyzer(show_video=show, seated=seated)
    console.print(Panel.fit(f"[bold magenta]{analyzer.name}[/bold magenta]", subtitle=analyzer.description))

    with console.status(f"[bold green]Running {analyzer.name}...[/bold green]"):
        try:
            result = asyncio.run(analyzer.analyze(path, output_video_path=output))
        except SensorUnavailableError as e:
            console.print(f"[bold red]Not ready:[/bold red] {e}")
            raise typer.Exit(code=1)
        except ValueError as e:
            console.print(f"[red]Analysis failed:[/red] {e}")
            raise typer.Exit(code=1)

    table = Table(title="Per-frame verdicts")
    table.add_column("Frame", style="cyan")
    table.add_column("Skeletons")
    table.add_column("Verdict")
    table.add_column("Checks")
    for frame in result["raw_frames"]:
        table.add_row(
            str(frame["frame"]),
            str(frame["skeleton_count"]),
            _verdict_cell(frame["evaluations"]),
            _flags(frame["evaluations"]),
        )
    console.print(table)

    counts = result["verdict_counts"]
    summary = "  ".join(
        f"[{VERDICT_STYLES[name]}]{name}: {counts.get(name, 0)}[/{VERDICT_STYLES[name]}]" for name in VERDICT_STYLES
    )
    dominant = result["dominant_verdict"]
    if dominant is None:
        console.print("[yellow]! No tracked skeleton in this recording[/yellow]")
    else:
        console.print(f"[green]✓ Analysis Complete[/green] {result['frames']} frames | {summary}")
        console.print(f"Overall: [{VERDICT_STYLES[dominant]}]{dominant.upper()}[/{VERDICT_STYLES[dominant]}]")


@app.command()
def live(
    camera: Optional[int] = typer.Option(None, "--camera", help="Webcam index (default CAMERA_INDEX)."),
    seated: bool = typer.Option(Config.SEATED_MODE, "--seated/--standing", help="Seated tracking mode."),
):
    """Live stance check from a webcam (press q to quit)."""
    from .tools.stance.mediapipe_source import MediaPipeSkeletonSource
    from .tools.stance.processor import StanceProcessor

    mode = TrackingMode.SEATED if seated else TrackingMode.DEFAULT
    source = MediaPipeSkeletonSource(camera if camera is not None else Config.camera_index(), mode=mode)
    processor = StanceProcessor(source)
    try:
        frames = processor.process(show_video=True)
    except SensorUnavailableError as e:
        console.print(f"[bold red]Not ready:[/bold red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ Session ended[/green] after {len(frames)} frames")


def main():
    app()


if __name__ == "__main__":
    main()
