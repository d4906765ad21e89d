"""Base type for domain ports."""

from typing import Protocol


class Port(Protocol):
    """Marker base for interfaces the domain consumes from collaborators."""

    pass
