"""
tasksync - Run callback-style tasks one after another

Executes an ordered list of asynchronous operations:
- One task in flight at a time, in list order
- Each task's result replaces its slot in the list
- Stops at the first failure and reports the failing index
"""

__version__ = "0.1.0"
__package_name__ = "tasksync"
__short_name__ = "tsync"

from .errors import ConfigError, InvalidInputError, MissingFunctionError, TaskFileError, TaskSyncError
from .runners import SequenceCallbacks, SequenceResult, Sequencer, run_and_wait, sync
from .tasks import TaskKind, TaskRecord, TaskSpec, plain_task

__all__ = [
    "sync",
    "run_and_wait",
    "Sequencer",
    "SequenceCallbacks",
    "SequenceResult",
    "TaskKind",
    "TaskRecord",
    "TaskSpec",
    "plain_task",
    "TaskSyncError",
    "InvalidInputError",
    "MissingFunctionError",
    "TaskFileError",
    "ConfigError",
]
