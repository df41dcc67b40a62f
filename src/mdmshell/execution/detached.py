"""
Fire-and-forget execution.

The command runs in a grandchild in its own session. The intermediate child
exits straight away and is reaped here, so the grandchild is inherited by
init and never becomes a zombie of the caller. Its process id is the only
thing handed back. If the command line redirects into a file, that file is
the only way to learn how the run ended.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from mdmshell._types import DetachedProcess
from mdmshell.execution._base import ProcessStrategy

logger = logging.getLogger(__name__)

_EXEC_FAILED = 127
# Written by the grandchild when exec fails. The pipe is close-on-exec, so a
# successful exec closes it without writing anything.
_EXEC_ERROR_MARK = b"!"


def _exec_detached(command_line: str, shell: str, pid_fd: int) -> None:
    """Runs in the intermediate child. Never returns."""
    status = 0
    try:
        os.setsid()
        grandchild = os.fork()
        if grandchild == 0:
            status = _EXEC_FAILED
            devnull = os.open(os.devnull, os.O_RDONLY)
            os.dup2(devnull, 0)
            try:
                os.execv(shell, [shell, "-c", command_line])
            except OSError:
                os.write(pid_fd, _EXEC_ERROR_MARK)
                raise
        os.write(pid_fd, str(grandchild).encode("ascii"))
    except BaseException:
        status = status or 1
    finally:
        os._exit(status)


def spawn_detached(command_line: str, *, shell: str = ProcessStrategy.shell) -> int:
    """
    Start a command line without waiting for it.

    Args:
        command_line: The shell command line to start.
        shell: Shell that interprets the line.

    Returns:
        The process id running the command line.

    Raises:
        OSError: If the process could not be started.
    """
    read_fd, write_fd = os.pipe()
    child = os.fork()
    if child == 0:
        os.close(read_fd)
        _exec_detached(command_line, shell, write_fd)

    os.close(write_fd)
    with os.fdopen(read_fd, "rb") as reader:
        _, status = os.waitpid(child, 0)
        # EOF once the grandchild has exec'd or died
        data = reader.read()

    if os.waitstatus_to_exitcode(status) != 0 or not data or _EXEC_ERROR_MARK in data:
        raise OSError(f"Could not start detached process: {command_line}")

    pid = int(data)
    logger.info("Started detached process %d: %s", pid, command_line)
    return pid


class DetachedExecution(ProcessStrategy[DetachedProcess]):
    """Start the program and return immediately with a DetachedProcess handle."""

    def run(self, command_line: str, *, output_file: Path | None = None) -> DetachedProcess:
        """
        Args:
            command_line: The shell command line to start.
            output_file: File the command line redirects into, kept on the
                handle so the caller can poll it later.
        """
        pid = spawn_detached(command_line, shell=self.shell)
        return DetachedProcess(pid=pid, command_line=command_line, output_file=output_file)
