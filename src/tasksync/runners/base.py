"""Base runner classes and protocols."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..tasks import TaskRecord

# Completion handler: handler(error, results)
CompletionHandler = Callable[[Any, list[Any]], None]


class SequenceStatus(Enum):
    """Lifecycle of one sequence run."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SequenceState:
    """
    Private state of one sequence run.

    ``tasks`` is both the input list and the result list: each slot is
    overwritten with its task's data once that task succeeds. ``index`` is
    the cursor; it only moves forward, one step per successful task.
    """

    tasks: list[Any]
    index: int = 0
    status: SequenceStatus = SequenceStatus.PENDING

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.tasks)


@dataclass
class SequenceResult:
    """Outcome of a finished sequence."""

    error: Any = None
    results: list[Any] = field(default_factory=list)
    index: int = 0

    @property
    def success(self) -> bool:
        return not self.error

    @property
    def failed_index(self) -> int | None:
        """Index of the failing task, or None on success."""
        if self.success:
            return None
        return self.index


@dataclass
class SequenceCallbacks:
    """
    Progress hooks for a sequence run.

    Allows CLI to display progress without coupling the sequencer to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    Hooks only observe; they never change how the sequence proceeds. An
    exception raised by a hook is logged at WARNING and otherwise ignored, so
    the completion handler still runs exactly once.
    """

    on_sequence_start: Callable[[int], None] | None = None  # total slots
    on_task_start: Callable[[int, TaskRecord], None] | None = None  # index, record
    on_task_complete: Callable[[int, Any], None] | None = None  # index, error
    on_sequence_complete: Callable[[SequenceResult], None] | None = None


class RunnerProtocol(Protocol):
    """Protocol for sequence runners."""

    def run(self, functions: Any, callback: CompletionHandler | None = None) -> None:
        """
        Start running ``functions``.

        Args:
            functions: A callable or a list/tuple of task descriptors
            callback: Completion handler called once with (error, results)
        """
        ...
