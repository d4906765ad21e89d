"""Identity hierarchy: base types for simulated test identities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Base for all test identities."""

    pass


@dataclass(frozen=True)
class Anonymous(Identity):
    """No principal installed."""

    pass
