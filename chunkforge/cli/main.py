"""ChunkForge CLI - main application entry point.

Commands
--------
    chunkforge chunk PATH...        chunk files and directories
    chunkforge minified PATH...     report minified/generated files
    chunkforge languages            list the configured languages
    chunkforge init-config          write a chunkforge.yaml with defaults
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from chunkforge.chunking import ChunkerRegistry, MinifiedThresholds
from chunkforge.chunking.minified import (
    has_min_token,
    is_minified_extension,
    is_minified_with_thresholds,
)
from chunkforge.cli.console import (
    ErrorRenderer,
    get_console,
    get_error_console,
    set_verbose_mode,
    tip,
)
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.config import Config, LoggingConfig, load_config
from chunkforge.core.config_loaders import save_config
from chunkforge.core.exceptions import ChunkForgeError
from chunkforge.core.logging import ScanLogger, configure_logging
from chunkforge.core.models import Chunk, ChunkLevel, ChunkResult, SourceFile

app = typer.Typer(
    name="chunkforge",
    help="Split source code into File -> Class -> Method chunks",
    add_completion=False,
    pretty_exceptions_enable=False,
)

_LEVEL_STYLES = {
    ChunkLevel.FILE: "bold",
    ChunkLevel.CLASS: "cyan",
    ChunkLevel.METHOD: "green",
}


def _config(ctx: typer.Context) -> Config:
    if ctx.obj is None:
        ctx.obj = load_config()
    return ctx.obj


def _build_registry(config: Config) -> ChunkerRegistry:
    try:
        return ChunkerRegistry.from_config(config)
    except ChunkForgeError as e:
        ErrorRenderer.render(e, context="While loading language tables")
        raise typer.Exit(code=1)


def iter_source_files(paths: List[Path]) -> Iterator[Path]:
    """Files under ``paths`` in sorted order, skipping hidden entries."""
    for path in paths:
        if path.is_file():
            yield path
            continue
        for entry in sorted(path.rglob("*")):
            relative = entry.relative_to(path)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if entry.is_file():
                yield entry


def _render_tree(result: ChunkResult) -> Tree:
    root = result.file_chunk
    language = result.file.language or "unknown"
    tree = Tree(f"[bold]{escape(result.file.path)}[/bold] [dim]({language})[/dim]")
    if root is None:
        tree.add("[dim]no chunks[/dim]")
        return tree

    def add_children(node: Tree, parent: Chunk) -> None:
        for child in result.children_of(parent.id):
            style = _LEVEL_STYLES.get(child.level, "")
            branch = node.add(
                f"[{style}]{child.level.value}[/{style}] {escape(child.name)} "
                f"[dim]L{child.start_line}-{child.end_line}[/dim]"
            )
            add_children(branch, child)

    add_children(tree, root)
    return tree


def _result_to_dict(result: ChunkResult) -> Dict[str, Any]:
    return {
        "path": result.file.path,
        "language": result.file.language,
        "chunks": [chunk.to_dict() for chunk in result.chunks],
        "errors": list(result.errors),
    }


def _chunk_one(
    registry: ChunkerRegistry,
    source: SourceFile,
    legacy: bool,
    token: CancellationToken,
) -> ChunkResult:
    if legacy:
        language = registry.language_for(source.extension)
        reference = registry.legacy_chunker(language) if language else None
        if reference is not None:
            return reference.chunk(source.with_language(language), token)
    return registry.chunk(source, token)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Log level (overrides the config file)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to chunkforge.yaml"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show tracebacks for errors"
    ),
) -> None:
    """ChunkForge - semantic code chunking."""
    if version:
        from chunkforge import __version__

        typer.echo(f"ChunkForge {__version__}")
        raise typer.Exit()

    set_verbose_mode(verbose)
    try:
        config = load_config(config_path)
        if log_level:
            config.logging = LoggingConfig(level=log_level, file=config.logging.file)
    except ChunkForgeError as e:
        ErrorRenderer.render(e, context="While loading configuration")
        raise typer.Exit(code=1)

    configure_logging(level=config.logging.level, log_file=config.log_file_path)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("chunk")
def chunk_command(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON"),
    legacy: bool = typer.Option(
        False, "--legacy", help="Use the reference chunker where one exists"
    ),
    include_minified: bool = typer.Option(
        False, "--include-minified", help="Chunk minified files too"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-file time limit in seconds"
    ),
) -> None:
    """Chunk files and print the File -> Class -> Method hierarchy.

    Examples:
        chunkforge chunk src/
        chunkforge chunk app.py --json
    """
    config = _config(ctx)
    registry = _build_registry(config)
    thresholds = MinifiedThresholds.from_config(config.minified)
    skip_minified = config.chunking.skip_minified and not include_minified

    scan = ScanLogger(", ".join(str(p) for p in paths))
    results: List[ChunkResult] = []
    for path in iter_source_files(paths):
        try:
            source = SourceFile.from_path(path)
            if skip_minified and is_minified_with_thresholds(
                source.content, source.path, thresholds
            ):
                scan.file_skipped(source.path, "minified")
                continue
            result = _chunk_one(registry, source, legacy, CancellationToken(timeout))
        except (ChunkForgeError, OSError) as e:
            scan.file_failed(str(path), str(e))
            ErrorRenderer.render(e, context=f"While chunking {path}")
            continue
        scan.file_done(result.file.path, len(result))
        results.append(result)
    scan.finish()

    if json_output:
        typer.echo(json.dumps([_result_to_dict(r) for r in results], indent=2))
    else:
        console = get_console()
        for result in results:
            console.print(_render_tree(result))

    get_error_console().print(
        f"[dim]{scan.files_ok} chunked, {scan.files_skipped} skipped, "
        f"{scan.files_failed} failed, {scan.chunks} chunks[/dim]"
    )
    if scan.files_skipped and not include_minified:
        tip("Use --include-minified to chunk skipped files")
    if scan.files_failed:
        raise typer.Exit(code=1)


@app.command("minified")
def minified_command(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories"),
) -> None:
    """Report which files look minified or generated."""
    config = _config(ctx)
    thresholds = MinifiedThresholds.from_config(config.minified)

    table = Table(title="Minified detection")
    table.add_column("Path", overflow="fold")
    table.add_column("Minified")
    table.add_column("Signal", style="dim")

    for path in iter_source_files(paths):
        try:
            content = path.read_bytes()
        except OSError as e:
            ErrorRenderer.render(e, context=f"While reading {path}")
            raise typer.Exit(code=1)

        name = str(path)
        minified = is_minified_with_thresholds(content, name, thresholds)
        if not minified:
            signal = ""
        elif has_min_token(name) or is_minified_extension(name):
            signal = "file name"
        else:
            signal = "content"
        table.add_row(name, "[red]yes[/red]" if minified else "no", signal)

    get_console().print(table)


@app.command("languages")
def languages_command(ctx: typer.Context) -> None:
    """List configured languages and their extensions."""
    registry = _build_registry(_config(ctx))

    table = Table(title="Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Name")
    table.add_column("Extensions")
    table.add_column("Grammar", style="dim")
    table.add_column("Reference", style="dim")

    for language in registry.supported_languages():
        lang_table = registry.table_for(language)
        if lang_table is None:
            continue
        table.add_row(
            language,
            lang_table.display_name,
            " ".join(lang_table.extensions),
            lang_table.grammar,
            "yes" if registry.legacy_chunker(language) is not None else "",
        )

    get_console().print(table)


@app.command("init-config")
def init_config_command(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("chunkforge.yaml"), help="Where to write"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite"),
) -> None:
    """Write the current configuration to a YAML file."""
    if path.exists() and not force:
        get_error_console().print(f"[red]{path} already exists[/red]")
        tip("Use --force to overwrite")
        raise typer.Exit(code=1)

    save_config(_config(ctx), path)
    get_console().print(f"Wrote {path}")


def cli_main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()
