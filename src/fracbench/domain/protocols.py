"""Protocol interfaces for fracbench collaborators."""

from __future__ import annotations

from typing import Protocol


class Transform(Protocol):
    """A candidate integer-to-fraction transform.

    Must be total over ``[0, 2**31 - 1]``: no exceptions, no side effects,
    always terminates.
    """

    def __call__(self, n: int, /) -> float:
        """Map ``n`` to the fraction formed by its decimal digits."""
        ...


class ProgressSink(Protocol):
    """Receives periodic progress signals from long-running loops."""

    def __call__(self, label: str, percent: float, /) -> None:
        """Report that *label* is *percent* complete (0-100)."""
        ...
