"""
Thread integration: carry the current LSpace into worker threads.

New threads start from a fresh root LSpace. These helpers capture the
creating thread's context so work runs inside it, around filters included:
- ContextThread: a threading.Thread that runs in its creator's LSpace
- ContextExecutor: a ThreadPoolExecutor that preserves submitted callables
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable

from lspace.manager import get_default_manager

if TYPE_CHECKING:
    from lspace.manager import Manager

logger = logging.getLogger(__name__)


class ContextThread(threading.Thread):
    """
    Thread that runs inside the LSpace active when it was constructed.

    Example:
        def worker():
            log.info("working for %s", lspace.get("user_id"))

        lspace.with_({"user_id": 6}, lambda: ContextThread(target=worker).start())
    """

    def __init__(self, *args: Any, manager: Manager | None = None, **kwargs: Any) -> None:
        """
        Initialize the thread.

        Args:
            *args: Passed to threading.Thread.
            manager: Manager to capture from. Defaults to the default manager.
            **kwargs: Passed to threading.Thread.
        """
        super().__init__(*args, **kwargs)
        self._manager = manager or get_default_manager()
        self._space = self._manager.current()

    def run(self) -> None:
        self._manager.enter(self._space, super().run)


class ContextExecutor(ThreadPoolExecutor):
    """
    ThreadPoolExecutor whose tasks run in the submitter's LSpace.

    Each callable is passed through Manager.preserve at submit time, so
    map() and submit() calls made from different contexts keep their own
    bindings and filters.

    Example:
        with ContextExecutor(max_workers=4) as pool:
            futures = [pool.submit(process, item) for item in items]
    """

    def __init__(self, max_workers: int | None = None, manager: Manager | None = None, **kwargs: Any) -> None:
        """
        Initialize the executor.

        Args:
            max_workers: Maximum number of worker threads.
            manager: Manager to capture from. Defaults to the default manager.
            **kwargs: Passed to ThreadPoolExecutor.
        """
        super().__init__(max_workers=max_workers, **kwargs)
        self._manager = manager or get_default_manager()

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        """Submit fn to run in the current LSpace on a worker thread."""
        preserved = self._manager.preserve(fn)
        logger.debug("Submitting %r in %r", fn, self._manager.current())
        return super().submit(preserved, *args, **kwargs)
