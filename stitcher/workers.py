# workers.py
"""
Background task execution utilities for Image Stitcher.
Defines a unified Worker for QRunnable tasks and the Qt task runner used to
decode cohorts without blocking the event loop.
"""
import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QCoreApplication, QObject, QRunnable, QThreadPool, Signal, Slot

from . import config

LOGGER = logging.getLogger("image_stitcher.workers")


class WorkerSignals(QObject):
    started = Signal()
    finished = Signal()
    error = Signal(str)
    result = Signal(object)


class Worker(QRunnable):
    """Wraps any function to run in a QThreadPool."""
    def __init__(self, fn: Callable, *args, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            self.signals.started.emit()
            result = self.fn(*self.args, **self.kwargs)
            self.signals.result.emit(result)
        except Exception as e:
            LOGGER.error("Worker error: %s", e)
            self.signals.error.emit(str(e))
        finally:
            self.signals.finished.emit()


class _ResultRelay(QObject):
    """Lives on the GUI thread; queued deliveries land in :meth:`deliver`."""

    @Slot(object)
    def deliver(self, packet) -> None:
        callback, value = packet
        callback(value)


class QtTaskRunner:
    """Run tasks on a ``QThreadPool`` and deliver results on the GUI thread."""

    def __init__(self, pool: Optional[QThreadPool] = None, max_threads: int = config.MAX_DECODE_WORKERS):
        self._pool = pool or QThreadPool.globalInstance()
        self._pool.setMaxThreadCount(max(self._pool.maxThreadCount(), max_threads))
        self._relay = _ResultRelay()

    def submit(self, fn: Callable[[Any], Any], arg: Any, callback: Callable[[Any], None]) -> None:
        def _task(value):
            return callback, fn(value)

        worker = Worker(_task, arg)
        worker.signals.result.connect(self._relay.deliver)
        worker.signals.error.connect(
            lambda message: LOGGER.error("Decode task failed: %s", message)
        )
        self._pool.start(worker)

    def drain(self) -> None:
        """Wait for running tasks and flush their queued results."""
        self._pool.waitForDone()
        QCoreApplication.sendPostedEvents()
        QCoreApplication.processEvents()
