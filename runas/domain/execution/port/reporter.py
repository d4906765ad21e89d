"""Result sink port."""

from abc import abstractmethod
from typing import Protocol

from runas.domain.execution.model.description import Description
from runas.domain.shared.port import Port


class Reporter(Port, Protocol):
    """Receives the outcome of every leaf the runner executes."""

    @abstractmethod
    def started(self, description: Description) -> None: ...

    @abstractmethod
    def passed(self, description: Description) -> None: ...

    @abstractmethod
    def failed(self, description: Description, error: AssertionError) -> None:
        """The test body, or a verification hook, failed an assertion."""
        ...

    @abstractmethod
    def errored(self, description: Description, error: BaseException) -> None:
        """The test body or its identity setup raised something else."""
        ...
