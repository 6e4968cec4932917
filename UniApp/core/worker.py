"""Background execution of blocking work with results delivered back on the GUI thread.

Every exception raised by the work function is caught at the worker boundary and
turned into a failed :class:`TaskResult`; nothing escapes into the Qt event loop.
"""
import dataclasses
import logging
from typing import Any, Callable, Optional, Set

from PySide6 import QtCore

from ..status import status

# Workers are kept alive here until their result has been delivered
_workers: Set['AsyncWorker'] = set()


@dataclasses.dataclass(frozen=True)
class TaskResult:
    """Outcome of a unit of background work.

    Attributes:
        data: The function's return value on success.
        error: The status exception describing the failure, or None on success.
    """
    data: Any = None
    error: Optional[status.BaseStatusException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def description(self) -> str:
        """Human-readable description of the failure, or an empty string on success."""
        return str(self.error) if self.error is not None else ''


def run_task(func: Callable[..., Any], *args: Any, **kwargs: Any) -> TaskResult:
    """Call ``func`` and capture its outcome as a :class:`TaskResult`.

    Status exceptions are kept as they are; any other exception is wrapped in
    :class:`~UniApp.status.status.UnknownException`.
    """
    try:
        return TaskResult(data=func(*args, **kwargs))
    except status.BaseStatusException as ex:
        return TaskResult(error=ex)
    except Exception as ex:
        logging.exception(f'Unexpected error in {getattr(func, "__name__", func)}')
        return TaskResult(error=status.UnknownException(str(ex)))


class AsyncWorker(QtCore.QThread):
    """
    Worker thread running a single blocking function.

    Signals:
        taskFinished (TaskResult): Emitted on the thread that owns the worker once the
            function has returned or raised.
    """
    taskFinished = QtCore.Signal(object)

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

        self.result: Optional[TaskResult] = None

        # The worker object lives on the creating thread, so this slot runs there
        self.finished.connect(self.on_thread_finished)

    def run(self) -> None:
        self.result = run_task(self.func, *self.args, **self.kwargs)

    @QtCore.Slot()
    def on_thread_finished(self) -> None:
        _workers.discard(self)
        result = self.result
        if result is None:
            result = TaskResult(error=status.UnknownException('Worker finished without a result.'))
        self.taskFinished.emit(result)
        self.deleteLater()


def start_asynchronous(func: Callable[..., Any], *args: Any,
                       on_finished: Callable[[TaskResult], None], **kwargs: Any) -> AsyncWorker:
    """
    Run ``func`` on a worker thread and hand its :class:`TaskResult` to ``on_finished``.

    The call returns immediately. ``on_finished`` is invoked later from the Qt event loop of
    the calling thread. There is no cancellation: once started, the work runs to completion.

    Args:
        func: The blocking function to run.
        *args, **kwargs: Arguments passed to func.
        on_finished: Callback receiving the result.

    Returns:
        AsyncWorker: The started worker.
    """
    worker = AsyncWorker(func, *args, **kwargs)
    worker.taskFinished.connect(on_finished)
    _workers.add(worker)
    worker.start()
    return worker


def start_synchronous(func: Callable[..., Any], *args: Any,
                      on_finished: Callable[[TaskResult], None], **kwargs: Any) -> None:
    """Run ``func`` on the calling thread and hand its result to ``on_finished`` immediately.

    Same contract as :func:`start_asynchronous`; used where no event loop is running.
    """
    on_finished(run_task(func, *args, **kwargs))
