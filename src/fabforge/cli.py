"""CLI entry point using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

app = typer.Typer(
    name="fabforge",
    help="Sprite rig (fab) editing toolkit.",
    no_args_is_help=False,
)


@app.command()
def new(
    name: Annotated[str, typer.Argument(help="Fab name")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: NAME.fab.json)"),
    ] = None,
    description: Annotated[str, typer.Option("--description", "-d", help="Description")] = "",
) -> None:
    """Create a new, empty fab file."""
    from fabforge.workspace import Workspace

    workspace = Workspace()
    document = workspace.new_document(name=name, description=description)
    save_path = output or Path(f"{name}.fab.json")
    result = workspace.save(document.id, save_path)
    if not result.ok:
        typer.echo(f"Error: could not write {save_path}: {result.error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Created fab '{name}' at {save_path}")


@app.command()
def info(
    path: Annotated[Path, typer.Argument(help="Path to a .fab.json file")],
) -> None:
    """Print the node tree of a fab file."""
    from fabforge.config import load_config
    from fabforge.content import load_fab_content
    from fabforge.files import from_sprite_uri
    from fabforge.rig.geometry import to_degrees

    sprite_root = load_config().content.sprite_root
    loaded = load_fab_content(path, 0)
    if loaded is None:
        typer.echo(f"Error: cannot load {path}", err=True)
        raise typer.Exit(1)

    skele = loaded.skele
    skele.tick()
    nodes = list(skele.walk())
    sprites = skele.render()
    typer.echo(f"Name: {loaded.fab_data.get('name', path.name)}")
    if loaded.fab_data.get("description"):
        typer.echo(f"Description: {loaded.fab_data['description']}")
    typer.echo(f"Nodes: {len(nodes)}  Sprites: {len(sprites)}")
    for node in nodes[1:]:
        indent = "  " * node.depth
        label = "(joint)"
        if node.uri:
            resolved = from_sprite_uri(node.uri, sprite_root)
            label = node.uri if resolved == node.uri else f"{node.uri} ({resolved})"
        flags = " [hidden]" if node.hidden else ""
        typer.echo(
            f"{indent}{node.id} angle={to_degrees(node.rotation):g} "
            f"mag={node.mag:g} sort={node.sort:g} {label}{flags}"
        )


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="Path to a .fab.json file")],
) -> None:
    """Check a fab file against the fab schema."""
    from fabforge.files import load_fab_file
    from fabforge.validation import fab_problems

    data = load_fab_file(path)
    if data is None:
        typer.echo(f"Error: cannot read {path}", err=True)
        raise typer.Exit(1)

    problems = fab_problems(data)
    if not problems:
        typer.echo(f"\u2713 {path} is valid")
        return
    typer.echo(f"\u2717 {path}: {len(problems)} problem{'s' if len(problems) != 1 else ''}")
    for problem in problems:
        typer.echo(f"  {problem}")
    raise typer.Exit(1)


@app.command()
def render(
    path: Annotated[Path, typer.Argument(help="Path to a .fab.json file")],
    output: Annotated[Path, typer.Option("--output", "-o", help="PNG output path")] = Path(
        "preview.png"
    ),
    width: Annotated[int | None, typer.Option("--width", "-W", help="Image width")] = None,
    height: Annotated[int | None, typer.Option("--height", "-H", help="Image height")] = None,
    size: Annotated[float | None, typer.Option("--size", "-s", help="Root size")] = None,
    direction: Annotated[
        float | None, typer.Option("--direction", help="Root direction in degrees")
    ] = None,
) -> None:
    """Render a wireframe preview of a fab file."""
    from fabforge.config import load_config
    from fabforge.content import load_fab_content
    from fabforge.preview import render_preview

    settings = load_config().preview
    width = width or settings.width
    height = height or settings.height
    size = settings.size if size is None else size
    direction = settings.direction if direction is None else direction

    loaded = load_fab_content(path, direction)
    if loaded is None:
        typer.echo(f"Error: cannot load {path}", err=True)
        raise typer.Exit(1)

    loaded.skele.tick_move(width / 2, height / 2, size, direction)
    render_preview(
        loaded.skele,
        output,
        width=width,
        height=height,
        bg_colour=settings.background,
        line_width=settings.line_width,
        joint_radius=settings.joint_radius,
    )
    typer.echo(f"Saved: {output}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version", is_eager=True)
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
) -> None:
    """FabForge - sprite rig (fab) editing toolkit."""
    if version:
        from fabforge import __version__

        typer.echo(f"fabforge {__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
