"""Exception hierarchy for fracbench."""


class FracbenchError(Exception):
    """Base class for all fracbench errors."""


class ConfigError(FracbenchError):
    """Invalid configuration file, environment or command-line arguments."""


class UnknownCandidateError(ConfigError):
    """A candidate name that is not in the registry."""

    def __init__(self, name: str, known: tuple[str, ...]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"Unknown candidate {name!r} (known: {', '.join(known)})")


class CandidateError(FracbenchError):
    """A transform raised while being evaluated on input ``n``."""

    def __init__(self, name: str, n: int | None) -> None:
        self.name = name
        self.n = n
        super().__init__(f"{name} raised on input {n}")
