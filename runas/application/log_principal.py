"""Logging of the principal a test is about to run as."""

import functools
import logging
from collections.abc import Callable

from runas.domain.auth import holder
from runas.domain.auth.model.principal import Principal

logger = logging.getLogger(__name__)


def log_principal(test_name: str | None = None) -> Principal | None:
    """Log the ambient principal and return it.

    Logs ``Principal=None`` when no principal is installed.
    """
    principal = holder.current_principal()
    if test_name:
        logger.info("%s: Principal=%s", test_name, principal)
    else:
        logger.info("Principal=%s", principal)
    return principal


def logging_principal[R](body: Callable[[], R], test_name: str | None = None) -> Callable[[], R]:
    """Wrap a test body so the principal is logged right before it runs."""

    @functools.wraps(body)
    def wrapper() -> R:
        log_principal(test_name)
        return body()

    return wrapper
