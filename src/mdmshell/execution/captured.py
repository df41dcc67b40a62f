"""
Synchronous run with captured, line-buffered output.

Standard error is merged into standard output so the caller sees both in the
order the child wrote them.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable

import click

from mdmshell._types import CommandResult
from mdmshell.execution._base import ProcessStrategy

logger = logging.getLogger(__name__)


def _echo_line(line: str) -> None:
    click.echo(line, nl=False)


class CapturedExecution(ProcessStrategy[CommandResult]):
    """
    Run a command, collect its output, optionally stream it as it arrives.

    A non-zero exit status is returned as data; what it means depends on the
    command, so interpreting it is the caller's job.

    Example:
        >>> result = CapturedExecution().run("echo hello")
        >>> result.output
        'hello\\n'
    """

    def __init__(
        self,
        *,
        echo: Callable[[str], None] = _echo_line,
        encoding: str = "utf-8",
    ) -> None:
        """
        Args:
            echo: Receives each output line when running verbosely.
            encoding: Text encoding the output is decoded with.
        """
        self._echo = echo
        self._encoding = encoding

    def run(self, command_line: str, *, verbose: bool = False) -> CommandResult:
        """
        Execute the command line and return its merged output.

        Args:
            command_line: The shell command line to run.
            verbose: Echo every line immediately, in the order produced.

        Returns:
            CommandResult with the full output text and the exit status.
        """
        logger.debug("Capturing: %s", command_line)
        lines: list[str] = []

        proc = subprocess.Popen(
            command_line,
            shell=True,
            executable=self.shell,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding=self._encoding,
            errors="replace",
        )
        with proc:
            if proc.stdout is None:
                raise RuntimeError(f"No output pipe for: {command_line}")
            for line in proc.stdout:
                lines.append(line)
                if verbose:
                    self._echo(line)

        logger.debug("Exit status %s from: %s", proc.returncode, command_line)
        return CommandResult(output="".join(lines), exit_code=proc.returncode)
