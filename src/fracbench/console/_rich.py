"""fracbench.console._rich -- Rich-based backend.

Coloured, structured terminal output using the Rich library.
"""

from __future__ import annotations

import threading

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "blue",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "progress.label": "bold cyan",
        "dim": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by Rich."""

    def __init__(self) -> None:
        self._con = Console(theme=_THEME, highlight=False)
        self._lock = threading.Lock()

    def _print(self, *objects: object, **kwargs: object) -> None:
        with self._lock:
            self._con.print(*objects, **kwargs)  # type: ignore[arg-type]

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._print(f"  {message}", style="info", markup=False)

    def success(self, message: str) -> None:
        self._print(f"  ✓ {message}", style="success", markup=False)

    def warning(self, message: str) -> None:
        self._print(f"  ⚠ {message}", style="warning", markup=False)

    def error(self, message: str) -> None:
        self._print(f"  ✗ {message}", style="error", markup=False)

    # -- Structured panels --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        self._print(Panel(content, title=title or None, border_style=style or "dim"))

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        t = Table(title=title or None, box=box.SIMPLE, show_edge=False, pad_edge=True)
        for h in headers:
            t.add_column(h)
        for r in rows:
            t.add_row(*r)
        self._print(t)

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        t = Table(
            title=title or None,
            box=box.SIMPLE,
            show_header=False,
            show_edge=False,
            pad_edge=True,
        )
        t.add_column("Key", style="bold", justify="right")
        t.add_column("Value")
        for k, v in data.items():
            t.add_row(k, v)
        self._print(t)

    # -- Progress -----------------------------------------------------------

    def progress(self, label: str, percent: float, detail: str = "") -> None:
        suffix = f"  [dim]{escape(detail)}[/]" if detail else ""
        self._print(f"  [progress.label]{escape(label)}[/] : {percent:.4f}%{suffix}")
