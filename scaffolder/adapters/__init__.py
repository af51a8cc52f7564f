"""Adapters — bindings to external processes.

Public re-exports for convenient access.
"""

from scaffolder.adapters.base import CommandOutcome, CommandRunner, LaunchError
from scaffolder.adapters.mock import FakeClock, RunnerCall, ScriptedRunner
from scaffolder.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandOutcome",
    "CommandRunner",
    "FakeClock",
    "LaunchError",
    "RunnerCall",
    "ScriptedRunner",
    "SubprocessRunner",
]
