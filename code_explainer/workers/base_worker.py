"""
Base worker classes for background operations.

Provides common functionality for all workers:
- Status reporting
- Cancellation
- Error handling
- State management
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot, QMutex, QMutexLocker

from code_explainer.services.errors import ServiceError


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """State of a worker."""
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()


class WorkerSignals(QObject):
    """
    Signals for worker communication.

    These signals are used to communicate between
    the worker thread and the UI thread.
    """
    # Status message
    status = pyqtSignal(str)

    # Worker started
    started = pyqtSignal()

    # Worker finished successfully with result
    finished = pyqtSignal(object)

    # Worker failed with error
    error = pyqtSignal(str, str)  # (error_type, message)

    # Worker was cancelled
    cancelled = pyqtSignal()

    # State changed
    state_changed = pyqtSignal(object)  # WorkerState


class WorkerMeta(type(QObject), type(ABC)):
    pass


class BaseWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    Base class for workers that run in a QThread.

    Subclass and implement the `do_work` method.

    Usage:
        worker = MyWorker(args)
        thread = WorkerThread(worker)
        worker.signals.finished.connect(on_result)
        thread.start()
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._state = WorkerState.PENDING
        self._cancelled = False
        self._mutex = QMutex()
        self._result: Any = None
        self._error: Optional[tuple[str, str]] = None

    @property
    def state(self) -> WorkerState:
        """Current worker state."""
        with QMutexLocker(self._mutex):
            return self._state

    @state.setter
    def state(self, value: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = value
        self.signals.state_changed.emit(value)

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        with QMutexLocker(self._mutex):
            return self._cancelled

    @property
    def result(self) -> Any:
        """Get the result (after completion)."""
        return self._result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        """Get error info (after failure)."""
        return self._error

    def cancel(self) -> None:
        """Request cancellation."""
        with QMutexLocker(self._mutex):
            self._cancelled = True
            if self._state == WorkerState.RUNNING:
                self._state = WorkerState.CANCELLING
        self.signals.state_changed.emit(WorkerState.CANCELLING)

    @pyqtSlot()
    def run(self) -> None:
        """
        Main worker execution method.

        This is called when the thread starts.
        Subclasses should not override this directly,
        instead override `do_work`.
        """
        self.state = WorkerState.RUNNING
        self.signals.started.emit()

        try:
            result = self.do_work()

            if self.is_cancelled:
                self.state = WorkerState.CANCELLED
                self.signals.cancelled.emit()
            else:
                self._result = result
                self.state = WorkerState.COMPLETED
                self.signals.finished.emit(result)

        except ServiceError as e:
            logger.warning(f"{type(self).__name__} failed: {e}")
            self._fail(type(e).__name__, e.user_message)
        except Exception as e:
            logger.exception(f"{type(self).__name__} crashed")
            self._fail(type(e).__name__, str(e))

    def _fail(self, error_type: str, message: str) -> None:
        self._error = (error_type, message)
        self.state = WorkerState.FAILED
        self.signals.error.emit(error_type, message)

    @abstractmethod
    def do_work(self) -> Any:
        """
        Perform the actual work.

        Subclasses must implement this method.
        Should check `is_cancelled` periodically and return early if True.

        Returns:
            The result of the work.
        """
        pass

    def report_status(self, message: str) -> None:
        """Report a status message."""
        self.signals.status.emit(message)


class WorkerThread(QThread):
    """
    Convenience class for running a worker in its own thread.

    Usage:
        thread = WorkerThread(my_worker)
        thread.start()
        # Worker runs in thread
        thread.wait()  # Wait for completion
    """

    def __init__(
        self,
        worker: BaseWorker,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        # Connect signals
        self.started.connect(self.worker.run)
        self.worker.signals.finished.connect(self.quit)
        self.worker.signals.error.connect(self.quit)
        self.worker.signals.cancelled.connect(self.quit)

    def cancel(self) -> None:
        """Cancel the worker."""
        self.worker.cancel()
