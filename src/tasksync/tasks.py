"""Task descriptors and their normalization into runnable records."""

import functools
import inspect
import logging
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

STRUCTURED_KEYS = ("callable", "arguments", "bound_context")

# Signature of the completion callback handed to every task: done(error, data)
Done = Callable[..., None]


class TaskKind(Enum):
    """Variants a task descriptor can take."""

    CALLABLE = "callable"
    STRUCTURED = "structured"
    INVALID = "invalid"


@dataclass
class TaskSpec:
    """
    Structured task descriptor.

    Equivalent to a mapping with the keys ``callable``, ``arguments`` and
    ``bound_context``. Plain dicts are accepted everywhere a TaskSpec is;
    other keys in a dict are ignored, so a dict without ``callable`` is a
    missing task.
    """

    callable: Any
    arguments: Any = field(default_factory=list)
    bound_context: Any = None


@dataclass
class TaskRecord:
    """
    A normalized, runnable task.

    The callable is invoked with ``arguments`` followed by one trailing
    completion callback.
    """

    callable: Callable[..., Any]
    arguments: list[Any] = field(default_factory=list)
    bound_context: Any = None

    def bind(self) -> Callable[..., Any]:
        """
        Return the callable bound to its context.

        Plain functions with a context other than themselves are bound to it
        as methods. Anything else (bound methods, builtins, partials, callable
        objects) already carries its receiver and is returned unchanged.
        """
        fn = self.callable
        if self.bound_context is None or self.bound_context is fn or not inspect.isfunction(fn):
            return fn
        return types.MethodType(fn, self.bound_context)


def classify_descriptor(descriptor: Any) -> TaskKind:
    """Tell which variant a raw descriptor is."""
    if callable(descriptor):
        return TaskKind.CALLABLE
    if isinstance(descriptor, TaskSpec | TaskRecord | Mapping):
        return TaskKind.STRUCTURED
    return TaskKind.INVALID


def _structured_fields(descriptor: TaskSpec | TaskRecord | Mapping) -> Mapping:
    if isinstance(descriptor, TaskSpec | TaskRecord):
        return {
            "callable": descriptor.callable,
            "arguments": descriptor.arguments,
            "bound_context": descriptor.bound_context,
        }
    return descriptor


def normalize_task(descriptor: Any) -> TaskRecord | None:
    """
    Normalize one descriptor.

    Returns None (the missing marker) for anything that does not yield a
    callable. Never raises.
    """
    kind = classify_descriptor(descriptor)

    if kind == TaskKind.CALLABLE:
        return TaskRecord(callable=descriptor, arguments=[], bound_context=descriptor)

    if kind == TaskKind.INVALID:
        return None

    raw = _structured_fields(descriptor)
    merged: dict[str, Any] = {"arguments": [], "callable": None, "bound_context": None}
    # Fields present on the descriptor win over the defaults
    merged.update((key, raw[key]) for key in merged if key in raw)

    fn = merged["callable"]
    if not callable(fn):
        unknown = sorted(str(key) for key in raw if key not in STRUCTURED_KEYS)
        logger.debug(
            "Structured task has no callable; recognised keys: %s; ignored keys: %s",
            ", ".join(STRUCTURED_KEYS),
            ", ".join(unknown) or "none",
        )
        return None

    arguments = merged["arguments"]
    if not isinstance(arguments, list | tuple):
        arguments = [arguments]

    # None and absent both mean "bind to the callable itself"
    bound_context = merged["bound_context"]
    if bound_context is None:
        bound_context = fn

    return TaskRecord(callable=fn, arguments=list(arguments), bound_context=bound_context)


def normalize_tasks(tasks: list[Any]) -> list[TaskRecord | None]:
    """Normalize every slot of ``tasks`` in place and return the same list."""
    for index, descriptor in enumerate(tasks):
        tasks[index] = normalize_task(descriptor)
    return tasks


def plain_task(fn: Callable[..., Any]) -> Callable[..., None]:
    """
    Adapt an ordinary function into a callback-style task.

    ``fn(*arguments)`` is called; its return value becomes the task's data
    and any exception it raises becomes the task's error.

    Example:
        sync([plain_task(load), {"callable": plain_task(parse), "arguments": "x"}], handler)
    """

    @functools.wraps(fn)
    def task(*args: Any) -> None:
        *arguments, done = args
        try:
            value = fn(*arguments)
        except Exception as e:
            done(e)
        else:
            done(None, value)

    return task


def describe_callable(fn: Any) -> str:
    """Human-readable name for a task callable."""
    target = fn.func if isinstance(fn, functools.partial) else fn
    name = getattr(target, "__qualname__", None) or getattr(target, "__name__", None)
    if name is None:
        return repr(fn)
    module = getattr(target, "__module__", None)
    return f"{module}.{name}" if module else name
