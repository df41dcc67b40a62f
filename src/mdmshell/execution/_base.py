"""
Abstract base for the process execution strategies.

Every strategy takes a finished shell command line. Validation happens
before a strategy is ever reached, so strategies never see bad input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

ResultT = TypeVar("ResultT")


class ProcessStrategy(ABC, Generic[ResultT]):
    """
    One way of running an external program.

    Subclasses differ only in what they hand back: captured text, an exit
    status, or a handle to a process nobody waits on.
    """

    #: Shell used to interpret command lines.
    shell: str = "/bin/sh"

    @abstractmethod
    def run(self, command_line: str) -> ResultT:
        """
        Run a shell command line.

        Args:
            command_line: Complete, already-escaped command line.

        Returns:
            The strategy's result type.
        """
        ...
