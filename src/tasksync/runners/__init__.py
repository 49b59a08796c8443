"""
Runners layer - Execution engines for task sequences.

Runners take a list of task descriptors, normalize it and drive the tasks
one at a time, reporting the outcome through a completion handler.
"""

from .base import RunnerProtocol, SequenceCallbacks, SequenceResult, SequenceState, SequenceStatus
from .sequential import Sequencer, SequentialRunner, run_and_wait, sync

__all__ = [
    "RunnerProtocol",
    "SequenceCallbacks",
    "SequenceResult",
    "SequenceState",
    "SequenceStatus",
    "Sequencer",
    "SequentialRunner",
    "run_and_wait",
    "sync",
]
