"""Synchronous run that shares the caller's terminal."""

from __future__ import annotations

import logging
import subprocess

from mdmshell.execution._base import ProcessStrategy

logger = logging.getLogger(__name__)


class PassthroughExecution(ProcessStrategy[int]):
    """Inherit the standard streams, block until exit, return the exit status."""

    def run(self, command_line: str) -> int:
        logger.debug("Running: %s", command_line)
        completed = subprocess.run(command_line, shell=True, executable=self.shell, check=False)
        return completed.returncode
