"""
Process execution strategies.
"""

from mdmshell.execution._base import ProcessStrategy
from mdmshell.execution.captured import CapturedExecution
from mdmshell.execution.detached import DetachedExecution, spawn_detached
from mdmshell.execution.passthrough import PassthroughExecution

__all__ = [
    "ProcessStrategy",
    "CapturedExecution",
    "PassthroughExecution",
    "DetachedExecution",
    "spawn_detached",
]
