"""
Logging integration.

Provides:
- ContextFilter: logging.Filter that copies context values onto records
- log_exceptions: around filter that logs failures with the active bindings
- configure_logging: install a context-aware handler (rich or plain)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Literal

from lspace.config import LoggingConfig
from lspace.manager import get_default_manager

if TYPE_CHECKING:
    from lspace.filters import AroundFilter
    from lspace.manager import Manager

logger = logging.getLogger(__name__)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects values from the current LSpace.

    For each configured key, sets ``record.<prefix><key>`` to the value
    visible in the logging thread's current LSpace, or the placeholder when
    unbound. Records are never dropped.

    Example:
        handler.addFilter(ContextFilter(LoggingConfig(keys=("request_id",))))
        handler.setFormatter(logging.Formatter("[%(request_id)s] %(message)s"))
    """

    def __init__(self, config: LoggingConfig | None = None, manager: Manager | None = None) -> None:
        super().__init__()
        self._config = config or LoggingConfig()
        self._manager = manager or get_default_manager()

    def filter(self, record: logging.LogRecord) -> bool:
        space = self._manager.current()
        for key in self._config.keys:
            value = space.get(key, self._config.missing)
            setattr(record, self._config.attribute(key), value)
        if self._config.include_all:
            record.lspace = space.as_dict()
        return True


def log_exceptions(
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    manager: Manager | None = None,
) -> AroundFilter:
    """
    Build an around filter that logs exceptions escaping its continuation.

    The exception is logged with the bindings visible at the time it was
    raised, then re-raised unchanged.

    Example:
        lspace.around_filter(log_exceptions(logging.getLogger("jobs")))

    Args:
        log: Logger to write to. Defaults to this module's logger.
        level: Level to log at.
        manager: Manager to read bindings from.

    Returns:
        The around filter.
    """
    log = log or logger
    manager = manager or get_default_manager()

    def around(continuation: Callable[[], Any]) -> Any:
        try:
            return continuation()
        except Exception as e:
            log.log(
                level,
                "Exception in context %r: %s",
                manager.current().as_dict(),
                e,
                exc_info=True,
            )
            raise

    return around


def configure_logging(
    config: LoggingConfig | None = None,
    target: logging.Logger | None = None,
    manager: Manager | None = None,
    style: Literal["auto", "rich", "simple"] = "auto",
) -> logging.Handler:
    """
    Install a handler that includes context values in log output.

    Args:
        config: Logging settings. Defaults to LoggingConfig().
        target: Logger to attach to. Defaults to the root logger.
        manager: Manager to read bindings from.
        style: Handler to use:
            - "auto": rich if available, otherwise a plain StreamHandler
            - "rich": rich.logging.RichHandler (raises ImportError if missing)
            - "simple": logging.StreamHandler

    Returns:
        The installed handler.

    Raises:
        ImportError: If style="rich" but rich is not installed.
        ValueError: If style is not recognised.
    """
    config = config or LoggingConfig()
    target = target if target is not None else logging.getLogger()

    if style == "auto":
        try:
            handler = _rich_handler()
        except ImportError:
            handler = logging.StreamHandler()
    elif style == "rich":
        handler = _rich_handler()
    elif style == "simple":
        handler = logging.StreamHandler()
    else:
        raise ValueError(f"Unknown logging style: {style!r}")

    handler.setLevel(config.level)
    handler.setFormatter(logging.Formatter(config.format))
    handler.addFilter(ContextFilter(config, manager))

    target.addHandler(handler)
    if target.level == logging.NOTSET or target.level > handler.level:
        target.setLevel(handler.level)

    logger.debug("Installed %s on %r for keys %s", type(handler).__name__, target, config.keys)
    return handler


def _rich_handler() -> logging.Handler:
    from rich.logging import RichHandler

    return RichHandler(show_time=False, show_path=False)
