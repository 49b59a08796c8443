"""Exceptions raised or reported by tasksync."""


class TaskSyncError(Exception):
    """Base class for tasksync errors."""


class InvalidInputError(TaskSyncError, TypeError):
    """The task list argument is not a list of tasks. Raised synchronously."""

    def __init__(self, message: str = "Functions list expected"):
        super().__init__(message)


class MissingFunctionError(TaskSyncError, TypeError):
    """
    A list slot does not hold a runnable task.

    Reported through the completion handler; ``index`` is set to the
    position of the offending slot before the handler is called.
    """

    def __init__(self, message: str = "Function expected"):
        super().__init__(message)
        self.index: int | None = None


class TaskFileError(TaskSyncError):
    """A task file is malformed or references something that cannot be imported."""


class ConfigError(TaskSyncError):
    """The configuration file is not valid YAML or holds an unusable value."""
