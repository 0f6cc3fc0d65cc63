"""fracbench.console._plain -- Plain-text backend.

Line-oriented print() output.  Used when stdout is not a TTY.
"""

from __future__ import annotations

import threading


class PlainBackend:
    """ConsoleProtocol implementation using only built-in print()."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _emit(self, text: str) -> None:
        with self._lock:
            print(text, flush=True)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._emit(f"  {message}")

    def success(self, message: str) -> None:
        self._emit(f"  [ok] {message}")

    def warning(self, message: str) -> None:
        self._emit(f"  [warn] {message}")

    def error(self, message: str) -> None:
        self._emit(f"  [error] {message}")

    # -- Structured panels --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        width = 60
        header = f" {title} " if title else ""
        lines = [f"\n{header.center(width, '=')}"]
        lines.extend(f"  {line}" for line in content.splitlines())
        lines.append("=" * width)
        self._emit("\n".join(lines))

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        lines: list[str] = []
        if title:
            lines.append(f"\n  {title}:")

        if headers or rows:
            # Calculate column widths
            all_rows = [headers, *rows]
            col_widths = [
                max(len(str(row[i])) if i < len(row) else 0 for row in all_rows)
                for i in range(len(headers))
            ]

            lines.append(
                "  " + "  ".join(h.ljust(w) for h, w in zip(headers, col_widths, strict=True))
            )
            lines.append("  " + "  ".join("-" * w for w in col_widths))
            for row in rows:
                cells = [
                    str(row[i]).ljust(col_widths[i]) if i < len(row) else " " * col_widths[i]
                    for i in range(len(headers))
                ]
                lines.append("  " + "  ".join(cells))

        if lines:
            self._emit("\n".join(lines))

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        lines: list[str] = []
        if title:
            lines.append(f"\n  {title}:")
        if data:
            max_key = max(len(k) for k in data)
            lines.extend(f"  {k.rjust(max_key)}: {v}" for k, v in data.items())
        if lines:
            self._emit("\n".join(lines))

    # -- Progress -----------------------------------------------------------

    def progress(self, label: str, percent: float, detail: str = "") -> None:
        suffix = f"  {detail}" if detail else ""
        self._emit(f"  {label} : {percent:.4f}%{suffix}")
