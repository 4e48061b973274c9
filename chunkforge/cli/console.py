"""Console output helpers.

Chunk output goes to stdout; errors, tips and the scan summary go to
stderr so ``--json`` output stays machine-readable.
"""

from __future__ import annotations

import traceback
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from chunkforge.core.exceptions import ChunkForgeError

_console: Console | None = None
_error_console: Console | None = None

# Set by the --verbose flag
_verbose_mode: bool = False


def get_console() -> Console:
    """Shared stdout console (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_error_console() -> Console:
    """Shared stderr console (lazy-loaded)."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True)
    return _error_console


def set_verbose_mode(enabled: bool) -> None:
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def tip(message: str) -> None:
    """Display a dimmed tip on stderr."""
    get_error_console().print(f"  [dim]Tip: {message}[/dim]")


class ErrorRenderer:
    """Renders exceptions as panels with "Why" and "How to fix" sections.

    Example
    -------
        try:
            registry.chunk(source_file)
        except ChunkForgeError as e:
            ErrorRenderer.render(e, context="While chunking src/app.py")
    """

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        if isinstance(exc, ChunkForgeError):
            error_code = exc.error_code
            why = exc.why_it_happened
            how_to_fix = list(exc.how_to_fix)
        else:
            error_code = "CF-ERR-000"
            why = f"{type(exc).__name__} raised while processing"
            how_to_fix = ["Run with --verbose for the full traceback"]

        content = ErrorRenderer._build_error_content(
            message=str(exc), context=context, why=why, how_to_fix=how_to_fix
        )
        get_error_console().print(
            Panel(
                content,
                title=f"[bold red]Error: {error_code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        should_show_traceback = (
            show_traceback if show_traceback is not None else is_verbose_mode()
        )
        if should_show_traceback:
            ErrorRenderer._render_traceback(exc)

    @staticmethod
    def _build_error_content(
        message: str, context: str, why: str, how_to_fix: List[str]
    ) -> Text:
        text = Text()
        if context:
            text.append(f"{context}\n\n", style="dim")

        text.append(message, style="bold red")
        text.append("\n\n")

        text.append("Why it happened:\n", style="bold cyan")
        text.append(f"  {why}\n\n", style="cyan")

        text.append("How to fix:\n", style="bold green")
        for fix in how_to_fix:
            text.append(f"  - {fix}\n", style="green")
        return text

    @staticmethod
    def _render_traceback(exc: BaseException) -> None:
        console = get_error_console()
        console.print()
        console.print("[dim]--- Traceback (--verbose mode) ---[/dim]")
        tb_text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        console.print(tb_text, style="dim", markup=False, highlight=False)
