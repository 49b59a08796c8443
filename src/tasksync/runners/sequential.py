"""Sequential runner - Executes callback-style tasks one at a time."""

import logging
import threading
from typing import Any

from ..errors import InvalidInputError, MissingFunctionError
from ..tasks import TaskRecord, normalize_tasks
from .base import CompletionHandler, SequenceCallbacks, SequenceResult, SequenceState, SequenceStatus

logger = logging.getLogger(__name__)


def _noop(error: Any, results: list[Any]) -> None:
    """Completion handler used when the caller supplies none."""


class _Completion:
    """
    The ``done(error, data)`` callback handed to a single task.

    Only the first call counts. A call that arrives while the task is still
    being invoked is parked and picked up by the step that started the task,
    so synchronous tasks advance the sequence without growing the stack.
    """

    def __init__(self, sequencer: "Sequencer", index: int):
        self.sequencer = sequencer
        self.index = index
        self.called = False
        self.in_step = True
        self.outcome: tuple[Any, Any] | None = None
        self._lock = threading.Lock()

    def __call__(self, error: Any = None, data: Any = None) -> None:
        with self._lock:
            if self.called:
                logger.warning("Task %d called its completion callback more than once; ignoring", self.index)
                return
            self.called = True
            if self.in_step:
                self.outcome = (error, data)
                return

        # Completed after the invoking step returned: continue on this thread
        self.sequencer._resume(self.index, error, data)

    def leave_step(self) -> tuple[Any, Any] | None:
        """Mark the invoking step as finished and return a parked outcome, if any."""
        with self._lock:
            self.in_step = False
            return self.outcome


class Sequencer:
    """
    Runs one list of tasks, once.

    The list given to the constructor is normalized in place and then used
    as the result buffer: each slot is overwritten with its task's data as
    soon as that task succeeds. The completion handler receives that same
    list object.
    """

    def __init__(
        self,
        functions: Any,
        callback: CompletionHandler | None = None,
        callbacks: SequenceCallbacks | None = None,
    ):
        """
        Validate input and normalize the task list.

        Args:
            functions: A callable, or a list/tuple of task descriptors
            callback: Completion handler, called once with (error, results)
            callbacks: Optional progress hooks

        Raises:
            InvalidInputError: ``functions`` is neither callable nor a list/tuple
        """
        if not callable(callback):
            callback = _noop
        if callable(functions):
            functions = [functions]
        elif isinstance(functions, tuple):
            functions = list(functions)
        if not isinstance(functions, list):
            raise InvalidInputError()

        self.callback: CompletionHandler = callback
        self.callbacks = callbacks or SequenceCallbacks()
        self.state = SequenceState(tasks=normalize_tasks(functions))
        self.result: SequenceResult | None = None

    def start(self) -> None:
        """Start the first task. Returns when a task goes asynchronous or the sequence ends."""
        if self.state.status != SequenceStatus.PENDING:
            raise RuntimeError("Sequencer can only be started once")

        self.state.status = SequenceStatus.RUNNING
        logger.debug("Starting sequence of %d task(s)", len(self.state.tasks))

        self._notify("on_sequence_start", len(self.state.tasks))

        self._drive()

    def _notify(self, hook_name: str, *args: Any) -> None:
        """Call a progress hook. A hook that raises is logged and skipped."""
        hook = getattr(self.callbacks, hook_name)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception:
            logger.warning("Progress hook %s raised; ignoring", hook_name, exc_info=True)

    def _drive(self) -> None:
        while self._step():
            pass

    def _step(self) -> bool:
        """
        Invoke the task at the cursor.

        Returns:
            True if the task completed successfully during its invocation and
            the next task should be started by the caller
        """
        state = self.state
        index = state.index
        record = state.tasks[index] if index < len(state.tasks) else None

        if not isinstance(record, TaskRecord):
            self._finish(MissingFunctionError())
            return False

        self._notify("on_task_start", index, record)

        logger.debug("Invoking task %d", index)
        done = _Completion(self, index)
        try:
            record.bind()(*record.arguments, done)
        except Exception as e:
            if done.called:
                logger.warning("Task %d raised after reporting completion: %s", index, e, exc_info=True)
            else:
                done(e)

        outcome = done.leave_step()
        if outcome is None:
            logger.debug("Task %d pending", index)
            return False
        return self._settle(index, *outcome)

    def _resume(self, index: int, error: Any, data: Any) -> None:
        if self._settle(index, error, data):
            self._drive()

    def _settle(self, index: int, error: Any, data: Any) -> bool:
        """Record a task outcome. Returns True if the next task should run."""
        self._notify("on_task_complete", index, error or None)

        if error:
            logger.debug("Task %d failed: %s", index, error)
            self._finish(error)
            return False

        state = self.state
        state.tasks[index] = data
        state.index += 1

        if state.exhausted:
            self._finish(None)
            return False
        return True

    def _finish(self, error: Any) -> None:
        state = self.state
        state.status = SequenceStatus.FAILED if error else SequenceStatus.SUCCEEDED

        if isinstance(error, BaseException):
            error.index = state.index

        self.result = SequenceResult(error=error, results=state.tasks, index=state.index)
        logger.debug("Sequence %s at index %d", state.status.value, state.index)

        self._notify("on_sequence_complete", self.result)

        self.callback(error, state.tasks)


def sync(
    functions: Any,
    callback: CompletionHandler | None = None,
    callbacks: SequenceCallbacks | None = None,
) -> None:
    """
    Run asynchronous tasks one after another.

    Each task is called with its arguments plus a trailing completion
    callback ``done(error, data)``. The next task starts only after the
    previous one called back without error. The first error stops the
    sequence.

    The list passed in is modified: every slot is normalized, then replaced
    by the ``data`` its task produced. ``callback(error, results)`` receives
    that same list. When a task fails, exception errors get an ``index``
    attribute with the failing position, and the slots from that position on
    still hold their unexecuted task records.

    Args:
        functions: A callable, or a list/tuple of callables and structured
            descriptors (dicts or TaskSpec with ``callable``, ``arguments``,
            ``bound_context``; other dict keys are ignored, and a dict whose
            ``callable`` is absent or not callable is a missing task)
        callback: Completion handler; a no-op when not callable
        callbacks: Optional progress hooks

    Raises:
        InvalidInputError: ``functions`` is not a callable, list or tuple
    """
    Sequencer(functions, callback, callbacks).start()


def run_and_wait(functions: Any, callbacks: SequenceCallbacks | None = None) -> SequenceResult:
    """
    Run tasks and block until the sequence has finished.

    There is no timeout: a task that never calls back blocks forever.

    Returns:
        SequenceResult with the error (if any), the result list and the cursor
    """
    finished = threading.Event()
    sequencer = Sequencer(functions, lambda error, results: finished.set(), callbacks)
    sequencer.start()
    finished.wait()
    return sequencer.result


class SequentialRunner:
    """Runner holding progress hooks shared by every sequence it starts."""

    def __init__(self, callbacks: SequenceCallbacks | None = None):
        self.callbacks = callbacks

    def run(self, functions: Any, callback: CompletionHandler | None = None) -> None:
        """Start a fresh sequence for ``functions``."""
        sync(functions, callback, self.callbacks)
