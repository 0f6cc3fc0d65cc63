"""fracbench.console -- terminal output system.

Usage (any module)::

    from fracbench.console import console

    console.info("Functions to test: 6")
    console.progress("PureMath", 12.5)

Configuration (call once in ``cli.main()``)::

    from fracbench.console import configure

    configure(backend="auto")  # "rich" | "plain" | "auto"

Every backend serializes its writes, so worker threads may share ``console``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from fracbench.console._plain import PlainBackend

if TYPE_CHECKING:
    from fracbench.console._protocol import ConsoleProtocol

BACKENDS = ("auto", "rich", "plain")

# ---------------------------------------------------------------------------
# Global singleton -- defaults to PlainBackend
# ---------------------------------------------------------------------------

_backend: ConsoleProtocol = PlainBackend()


def configure(*, backend: str = "auto") -> None:
    """Select the console backend.

    Args:
        backend: ``"rich"`` -- always use Rich.
                 ``"plain"`` -- always use plain text.
                 ``"auto"`` (default) -- Rich when stdout is a TTY,
                 plain otherwise.

    Raises:
        ValueError: If *backend* is not one of :data:`BACKENDS`.
    """
    global _backend  # noqa: PLW0603

    if backend not in BACKENDS:
        msg = f"Unknown console backend {backend!r} (expected one of {', '.join(BACKENDS)})"
        raise ValueError(msg)

    if backend == "auto":
        backend = "rich" if sys.stdout.isatty() else "plain"

    if backend == "plain":
        _backend = PlainBackend()
        return

    from fracbench.console._rich import RichBackend

    _backend = RichBackend()


def get_console() -> ConsoleProtocol:
    """Return the current backend instance."""
    return _backend


def report_progress(label: str, percent: float) -> None:
    """ProgressSink that writes to the current console.

    A plain module-level function so it can be handed to process workers.
    """
    _backend.progress(label, percent)


# ---------------------------------------------------------------------------
# Proxy object -- ``from fracbench.console import console``
# ---------------------------------------------------------------------------


class _ConsoleProxy:
    """Transparent proxy that delegates to the current ``_backend``.

    This lets callers import ``console`` once at module level and
    automatically pick up any later ``configure()`` call.
    """

    def __getattr__(self, name: str) -> object:
        return getattr(_backend, name)


console: ConsoleProtocol = _ConsoleProxy()  # type: ignore[assignment]
