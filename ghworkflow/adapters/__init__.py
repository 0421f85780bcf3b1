"""Adapters — bindings for GitHub, git and the terminal.

Public re-exports for convenient access.
"""

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.adapters.console import ConsoleInteraction
from ghworkflow.adapters.github import GhControlPlane
from ghworkflow.adapters.memory import InMemoryControlPlane, ScriptedInteraction

__all__ = [
    "ConsoleInteraction",
    "ControlPlane",
    "GhControlPlane",
    "InMemoryControlPlane",
    "ScriptedInteraction",
    "UserInteraction",
]
