"""Shared pytest fixtures for tasksync tests."""

import sys
import textwrap

import pytest
from typer.testing import CliRunner

SAMPLE_MODULE = "tsync_sample_steps"

SAMPLE_SOURCE = '''
"""Callback-style steps used by task file tests."""


def hello(done):
    done(None, "hello")


def add(a, b, done):
    done(None, a + b)


def fail(done):
    done(RuntimeError("boom"))


def square(x):
    return x * x


class Greeter:
    def __init__(self, greeting):
        self.greeting = greeting

    def greet(self, name, done):
        done(None, f"{self.greeting}, {name}")


greeter = Greeter("Hi")


def context_of(self, done):
    done(None, self)


NOT_CALLABLE = 42
'''


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep user config and environment out of tests."""
    monkeypatch.setenv("TSYNC_CONFIG_DIR", str(tmp_path / "no-config"))
    monkeypatch.delenv("TSYNC_TASKS_DIR", raising=False)


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_module(tmp_path, monkeypatch):
    """Importable module of sample steps, returns its name."""
    module_dir = tmp_path / "modules"
    module_dir.mkdir()
    (module_dir / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_SOURCE)

    monkeypatch.syspath_prepend(str(module_dir))
    sys.modules.pop(SAMPLE_MODULE, None)
    yield SAMPLE_MODULE
    sys.modules.pop(SAMPLE_MODULE, None)


@pytest.fixture
def write_task_file(tmp_path):
    """Write a task file from YAML text and return its path."""

    def write(content: str, name: str = "tasks.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path

    return write


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    tasks_dir = tmp_path / "tasks"
    tasks_dir.mkdir()

    config_file = config_dir / "config.yaml"
    config_file.write_text(
        f"""
paths:
  tasks_dir: "{tasks_dir}"

output:
  show_results: true
  max_value_width: 20

logging:
  level: "DEBUG"
  console_logging: false
"""
    )
    return config_file
