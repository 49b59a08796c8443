"""
Task file loading - YAML definitions of task sequences.

A task file lists references to importable callables. ``bound_context`` is
taken literally; use ``bound_context_ref`` to import the context instead:

    name: release
    description: Build and publish
    tasks:
      - "myproject.steps:clean"
      - callable: "myproject.steps:build"
        arguments: ["wheel"]
      - callable: "myproject.steps:Publisher.upload"
        bound_context_ref: "myproject.steps:publisher"
      - callable: "myproject.steps:notify"
        bound_context: {channel: releases}
      - callable: "myproject.steps:checksum"
        plain: true
"""

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import AppConfig
from .errors import TaskFileError
from .tasks import plain_task

logger = logging.getLogger(__name__)

TASK_FILE_SUFFIXES = (".yaml", ".yml")


@dataclass
class SequenceDefinition:
    """
    A named, ordered list of task descriptors loaded from a file.

    Definitions are data - running them is the runner's job.
    """

    name: str
    description: str = ""
    tasks: list[Any] = field(default_factory=list)
    source: Path | None = None


def import_reference(reference: str) -> Any:
    """
    Resolve a ``module:attribute.path`` reference.

    Raises:
        TaskFileError: The reference is malformed or cannot be resolved
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise TaskFileError(f"Invalid reference {reference!r}: expected 'module:attribute'")

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise TaskFileError(f"Cannot import module {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise TaskFileError(f"{reference!r}: {module_name} has no attribute path {attr_path!r}") from e

    return target


def _build_descriptor(entry: Any) -> Any:
    """Turn one YAML entry into a task descriptor."""
    if isinstance(entry, str):
        return import_reference(entry)

    if not isinstance(entry, dict):
        # Left as is; the runner reports it as a missing function at this position
        return entry

    descriptor = dict(entry)
    plain = bool(descriptor.pop("plain", False))

    if isinstance(descriptor.get("callable"), str):
        descriptor["callable"] = import_reference(descriptor["callable"])
    if "bound_context_ref" in descriptor:
        reference = descriptor.pop("bound_context_ref")
        if "bound_context" in descriptor:
            raise TaskFileError("Use either bound_context or bound_context_ref, not both")
        if not isinstance(reference, str):
            raise TaskFileError(f"bound_context_ref must be a 'module:attribute' string, got {reference!r}")
        descriptor["bound_context"] = import_reference(reference)

    if plain and callable(descriptor.get("callable")):
        descriptor["callable"] = plain_task(descriptor["callable"])

    return descriptor


def load_task_file(path: Path) -> SequenceDefinition:
    """
    Load a sequence definition from a YAML task file.

    Args:
        path: Task file path

    Returns:
        SequenceDefinition whose tasks are ready to pass to ``sync``

    Raises:
        TaskFileError: File missing, unparsable or structurally invalid
    """
    if not path.is_file():
        raise TaskFileError(f"Task file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TaskFileError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise TaskFileError(f"{path}: expected a mapping with a 'tasks' list")

    entries = data.get("tasks")
    if not isinstance(entries, list):
        raise TaskFileError(f"{path}: 'tasks' must be a list")

    tasks = [_build_descriptor(entry) for entry in entries]
    logger.debug("Loaded %d task(s) from %s", len(tasks), path)

    return SequenceDefinition(
        name=str(data.get("name") or path.stem),
        description=str(data.get("description") or ""),
        tasks=tasks,
        source=path,
    )


def resolve_task_file(name_or_path: str, config: AppConfig) -> Path:
    """
    Find a task file given a path or a bare name.

    Bare names are looked up in ``paths.tasks_dir`` with a .yaml/.yml suffix.
    """
    candidate = Path(name_or_path).expanduser()
    if candidate.is_file():
        return candidate

    tasks_dir = config.paths.tasks_dir
    if tasks_dir is not None:
        for suffix in ("", *TASK_FILE_SUFFIXES):
            path = tasks_dir / f"{name_or_path}{suffix}"
            if path.is_file():
                return path

    raise TaskFileError(f"Task file not found: {name_or_path}")
