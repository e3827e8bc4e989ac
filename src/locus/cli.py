"""CLI entry point for Locus."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from locus_outline.node import OutlineNode, count_nodes, find_node
from locus_outline.ops import filter_tree
from locus.config.loader import load_config
from locus.models.config import Config
from locus.services.exceptions import PersistenceError
from locus.services.memo_file import MemoFile
from locus.services.outline_store import OutlineStore
from locus.utils.logging import bind_memo_context, configure_logging, get_logger

logger = get_logger(__name__)
console = Console()


def _load(ctx: click.Context) -> tuple[Config, MemoFile]:
    """Load configuration and open the memo file named in it.

    Raises:
        click.ClickException: If the configuration is invalid
    """
    config_path: Optional[Path] = ctx.obj.get("config_path")
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    memo_file = MemoFile.from_config(config.storage)
    bind_memo_context(memo_file.paths.memo_path)
    logger.info("config_loaded", path=str(config_path) if config_path else None)
    return config, memo_file


def _read_store(ctx: click.Context) -> tuple[OutlineStore, MemoFile]:
    config, memo_file = _load(ctx)
    try:
        nodes = memo_file.read()
    except OSError as e:
        raise click.ClickException(f"Cannot read memo file: {e}") from e
    return OutlineStore.from_config(nodes, config.history), memo_file


def _build_tree(parent: Tree, nodes: list[OutlineNode], show_all: bool, ordered: bool = False) -> None:
    for number, node in enumerate(nodes, start=1):
        label = escape(node.text.replace("\n", " ⏎ ")) or "[dim](empty)[/dim]"
        if ordered:
            label = f"{number}. {label}"
        if node.closed and node.children and not show_all:
            label += f" [dim](+{count_nodes(node.children)})[/dim]"
        branch = parent.add(f"[dim]{node.id}[/dim] {label}")
        if show_all or not node.closed:
            _build_tree(branch, node.children, show_all, node.ol)


def _render(nodes: list[OutlineNode], title: str, show_all: bool = False) -> None:
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _build_tree(tree, nodes, show_all)
    console.print(tree)


@click.group()
@click.version_option(version="0.1.0", prog_name="locus")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/locus/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """Locus - a collapsible outliner kept in a plain-text memo file."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    configure_logging()


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Expand collapsed nodes")
@click.pass_context
def show(ctx: click.Context, show_all: bool):
    """Print the outline as a tree."""
    store, memo_file = _read_store(ctx)
    _render(store.tree, memo_file.root_text, show_all)


@cli.command()
@click.argument("query")
@click.pass_context
def search(ctx: click.Context, query: str):
    """Show nodes containing QUERY together with their ancestors."""
    store, _ = _read_store(ctx)
    matches = filter_tree(store.tree, query)
    if not matches:
        console.print(f"[yellow]No nodes match[/yellow] {query!r}")
        return
    _render(matches, f"Search: {query}", show_all=True)


@cli.command("export-text")
@click.option("--id", "node_id", type=int, help="Export only this node's subtree")
@click.pass_context
def export_text(ctx: click.Context, node_id: Optional[int]):
    """Write the outline as indented text to stdout."""
    store, _ = _read_store(ctx)
    text = store.export_text(node_id)
    if text is None:
        raise click.ClickException(f"Node not found: {node_id}")
    click.echo(text)


@cli.command("export-markdown")
@click.option("--id", "node_id", type=int, help="Export only this node's subtree")
@click.pass_context
def export_markdown(ctx: click.Context, node_id: Optional[int]):
    """Write the outline as Markdown to stdout."""
    store, _ = _read_store(ctx)
    markdown = store.export_markdown(node_id)
    if markdown is None:
        raise click.ClickException(f"Node not found: {node_id}")
    click.echo(markdown)


def _import(ctx: click.Context, source: Path, parent_id: Optional[int], markdown: bool) -> None:
    store, memo_file = _read_store(ctx)
    content = source.read_text(encoding="utf-8")

    if markdown:
        imported = store.import_markdown(content, parent_id)
    else:
        imported = store.import_text(content, parent_id)

    if not imported:
        if parent_id is not None and find_node(store.tree, parent_id) is None:
            raise click.ClickException(f"Node not found: {parent_id}")
        console.print("[yellow]Nothing to import[/yellow]")
        return

    try:
        memo_file.write(store.tree)
    except OSError as e:
        raise click.ClickException(f"Cannot write memo file: {e}") from e
    console.print(f"[green]Imported[/green] {len(imported)} top-level node(s) from {source}")


@cli.command("import-text")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--under", "parent_id", type=int, help="Graft under this node (default: top level)")
@click.pass_context
def import_text(ctx: click.Context, source: Path, parent_id: Optional[int]):
    """Append an indented-text file to the outline."""
    _import(ctx, source, parent_id, markdown=False)


@cli.command("import-markdown")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--under", "parent_id", type=int, help="Graft under this node (default: top level)")
@click.pass_context
def import_markdown(ctx: click.Context, source: Path, parent_id: Optional[int]):
    """Append a Markdown file to the outline."""
    _import(ctx, source, parent_id, markdown=True)


@cli.command()
@click.pass_context
def backups(ctx: click.Context):
    """List backup slots, newest first."""
    _, memo_file = _load(ctx)
    entries = memo_file.list_backups()
    if not entries:
        console.print("[dim]No backups yet[/dim]")
        return

    table = Table(title="Backups")
    table.add_column("Name")
    table.add_column("Modified (UTC)")
    for entry in entries:
        table.add_row(entry.name, entry.mtime.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)


@cli.command()
@click.argument("name")
@click.pass_context
def restore(ctx: click.Context, name: str):
    """Restore backup NAME (e.g. memo_03.cgi) over the live memo file."""
    _, memo_file = _load(ctx)
    try:
        nodes = memo_file.restore(name)
    except PersistenceError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"Cannot restore backup: {e}") from e

    console.print(f"[green]Restored[/green] {name} ({count_nodes(nodes)} nodes)")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
