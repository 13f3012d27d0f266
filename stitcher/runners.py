"""Task runners that execute work off the owning thread.

A runner executes ``fn(arg)`` somewhere else and hands the return value to
``callback`` back on the thread that owns the runner.  The owning thread is
therefore the only one that ever touches cohort state, so the fold needs no
locking.  :class:`ThreadPoolTaskRunner` is the Qt-free implementation used by
the command line and tests; the GUI uses ``workers.QtTaskRunner``.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional, Protocol, Tuple

from . import config

LOGGER = logging.getLogger("image_stitcher.runners")


class TaskRunner(Protocol):
    def submit(self, fn: Callable[[Any], Any], arg: Any, callback: Callable[[Any], None]) -> None:
        ...

    def drain(self) -> None:
        ...


class ThreadPoolTaskRunner:
    """Run tasks on a thread pool; deliver results from :meth:`drain`.

    Callbacks run on the thread calling :meth:`drain`, in completion order.
    """

    def __init__(self, max_workers: int = config.MAX_DECODE_WORKERS) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="stitch-decode"
        )
        self._pending: List[Tuple[Future, Callable[[Any], None]]] = []

    def submit(self, fn: Callable[[Any], Any], arg: Any, callback: Callable[[Any], None]) -> None:
        future = self._executor.submit(fn, arg)
        self._pending.append((future, callback))

    def drain(self) -> None:
        """Block until every submitted task finished, delivering each result."""
        while self._pending:
            batch, self._pending = self._pending, []
            callbacks = {future: callback for future, callback in batch}
            for future in as_completed(callbacks):
                callbacks[future](future.result())

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ThreadPoolTaskRunner":
        return self

    def __exit__(self, *exc_info: Optional[BaseException]) -> None:
        self.shutdown()
