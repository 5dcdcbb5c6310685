from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from adapters.filesystem.json_utils import dump_batches
from adapters.filesystem.scene_graph_repository import FileSystemSceneGraphRepository
from adapters.memory.scene_graph import InMemorySceneGraph
from app.config import load_settings
from domain.services.build_scene_markers import SceneMarkerBuilder

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command("validate")
def validate(scene_path: Path = typer.Argument(..., help="Scene graph JSON file.")) -> None:
    if not scene_path.exists():
        console.print(f"[red]File not found:[/] {scene_path}")
        raise typer.Exit(code=1)

    try:
        document = FileSystemSceneGraphRepository().load_by_path(scene_path)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"[green]Valid scene graph:[/] {scene_path} "
        f"({len(document.nodes)} nodes, {len(document.edges)} edges)"
    )


@app.command("summarize")
def summarize(
    scene_path: Path = typer.Argument(..., help="Scene graph JSON file."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="YAML file with marker settings.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the batches as JSON."),
) -> None:
    try:
        settings = load_settings(config_path).markers
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1) from exc

    try:
        document = FileSystemSceneGraphRepository().load_by_path(scene_path)
    except (OSError, ValidationError, ValueError) as exc:
        console.print(f"[red]Could not load scene:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if not settings.visualizer.colormap_range_is_valid:
        console.print(
            "[yellow]places colormap range is empty; distance colors fall back to default[/]"
        )

    builder = SceneMarkerBuilder(
        visualizer_config=settings.visualizer,
        layer_configs=settings.layers,
        dynamic_configs=settings.dynamic_layers,
        colormap=settings.colormap,
        label_names=settings.label_lookup(),
    )
    batches = builder.build(InMemorySceneGraph.from_document(document), settings.header())

    if as_json:
        typer.echo(dump_batches(batches).decode("utf-8"))
        return

    table = Table(title=f"Markers for {scene_path.name}")
    table.add_column("namespace")
    table.add_column("id", justify="right")
    table.add_column("kind")
    table.add_column("points", justify="right")
    table.add_column("colors", justify="right")
    for batch in batches:
        table.add_row(
            batch.namespace,
            str(batch.id),
            batch.kind.value,
            str(len(batch.points)),
            str(len(batch.colors)),
        )
    console.print(table)


if __name__ == "__main__":
    app()
