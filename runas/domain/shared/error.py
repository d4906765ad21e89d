"""Error hierarchy for runas.

Error layers:
- RunasError: Base class for all runas errors
- DomainError: Invalid declarations and identity verification failures
- InfrastructureError: Factory construction and container failures

Verification errors are also AssertionErrors so test runners report them as
test failures rather than errors.
"""


class RunasError(Exception):
    """Base class for all runas errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(RunasError):
    """Base class for domain errors."""


class DeclarationError(DomainError, ValueError):
    """A declaration or child execution was built from invalid arguments."""


class VerificationError(DomainError, AssertionError):
    """The identity active during a test did not match what was declared."""


class IdentityMismatchError(VerificationError):
    """The ambient principal differs from the expected principal."""

    def __init__(self, actual: object, expected: object) -> None:
        super().__init__(
            f"Invalid principal, actual={actual}, expected={expected}",
            code="identity_mismatch",
        )
        self.actual = actual
        self.expected = expected


class UnusedIdentitiesError(VerificationError):
    """Expected identities were left unconsumed at the end of a test class."""

    def __init__(self, count: int) -> None:
        super().__init__(
            f"Unused principals remaining on {count} methods",
            code="unused_identities",
        )
        self.count = count


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(RunasError):
    """Base class for infrastructure errors."""


class ContainerUnavailableError(InfrastructureError):
    """No dependency container could be provided for factory construction."""


class FactoryConstructionError(InfrastructureError):
    """An identity factory could not be constructed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
