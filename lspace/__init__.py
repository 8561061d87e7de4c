"""
lspace: Hierarchical logical execution contexts.

An LSpace is a key/value store attached to the current thread of control.
It propagates into nested scopes and, through preserve, into deferred
closures run on other threads. Around filters registered on an LSpace wrap
any code run inside it.

Example:
    import lspace

    def handle():
        lspace.with_({"job_id": 7}, run_job)

    def run_job():
        assert lspace.get("user_id") == 6
        assert lspace.get("job_id") == 7

    lspace.with_({"user_id": 6}, handle)
"""

from lspace.api import (
    around_filter,
    clean,
    current,
    enter,
    fork,
    get,
    keys,
    preserve,
    set,
    with_,
)
from lspace.config import LoggingConfig, load_config
from lspace.filters import AroundFilter, compose
from lspace.log import ContextFilter, configure_logging, log_exceptions
from lspace.manager import Manager, get_default_manager
from lspace.node import LSpace
from lspace.threads import ContextExecutor, ContextThread

__version__ = "0.1.0"

__all__ = [
    # Core types
    "LSpace",
    "Manager",
    "AroundFilter",
    "compose",
    "get_default_manager",
    # Default manager operations
    "current",
    "clean",
    "with_",
    "enter",
    "fork",
    "preserve",
    "get",
    "set",
    "keys",
    "around_filter",
    # Threads
    "ContextThread",
    "ContextExecutor",
    # Logging
    "ContextFilter",
    "LoggingConfig",
    "configure_logging",
    "load_config",
    "log_exceptions",
]
