"""fracbench.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for the fracbench terminal output.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """fracbench terminal output protocol.

    Implementations must be safe to call from several worker threads at
    once: each call writes its whole output without interleaving.

    **General messages**::

        console.info("Functions to test: 6")
        console.success("Succeeded on : PureMath")
        console.warning("Timed out waiting for workers")
        console.error("Failed on : Broken")

    **Structured panels**::

        console.panel("Speed test complete", title="fracbench")
        console.table(["Name", "ops/s"], [["IfMadness", "9000000"]])
        console.kv({"Failures": "0", "Elapsed": "12.3s"})

    **Progress**::

        console.progress("PureMath", 42.0)
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Structured panels --------------------------------------------------

    def panel(self, content: str, *, title: str = "", style: str = "") -> None:
        """Display *content* in a bordered panel."""
        ...

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Display key-value pairs."""
        ...

    # -- Progress -----------------------------------------------------------

    def progress(self, label: str, percent: float, detail: str = "") -> None:
        """Display a ``label : percent%`` progress line."""
        ...
