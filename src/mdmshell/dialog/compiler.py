"""
Dialog helper argument compiler and runner.

The helper is invoked as::

    <helper> -startlaunchd -windowType <type> [display options...] [raw args] [> output-file]

and reports the user's choice through its exit status (see HelperResponse).
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mdmshell._types import DetachedProcess, WindowType
from mdmshell.dialog.options import OPTION_REGISTRY, OptionSpec
from mdmshell.errors import HelperNotInstalled, InvalidOptionValue
from mdmshell.execution.detached import DetachedExecution
from mdmshell.execution.passthrough import PassthroughExecution
from mdmshell.settings import ClientSettings, is_executable

logger = logging.getLogger(__name__)

# -startlaunchd keeps the helper from handing itself off to launchd.
STARTUP_FLAG = "-startlaunchd"

# Keys that may ride along in an options mapping but aren't display options.
CONTROL_KEYS = frozenset({"arg_string", "output_file", "abandon_process"})


@dataclass(frozen=True, slots=True)
class HelperInvocation:
    """A compiled dialog helper call."""

    program: Path
    args: tuple[str, ...]
    arg_string: str | None = None
    output_file: Path | None = None

    @property
    def command_line(self) -> str:
        """
        The shell line to run.

        Every compiled token is quoted. The raw arg_string is appended
        verbatim, so escaping inside it is the caller's responsibility.
        """
        line = " ".join(shlex.quote(token) for token in (str(self.program), *self.args))
        if self.arg_string:
            line += f" {self.arg_string}"
        if self.output_file is not None:
            line += f" > {shlex.quote(str(self.output_file))}"
        return line


class DialogCompiler:
    """
    Turns a window type and display options into a HelperInvocation.

    Options are compiled in the order the caller supplied them. Unknown
    option names are skipped so newer callers keep working against this
    version; pass strict=True to reject them instead.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        registry: Mapping[str, OptionSpec] = OPTION_REGISTRY,
        strict: bool = False,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._registry = registry
        self._strict = strict

    def installed(self) -> bool:
        return is_executable(self._settings.helper_path)

    def compile(
        self,
        window_type: WindowType | str,
        options: Mapping[str, Any] | None = None,
        *,
        arg_string: str | None = None,
        output_file: str | Path | None = None,
    ) -> HelperInvocation:
        """
        Compile a dialog request.

        Args:
            window_type: "hud", "utility"/"util" or "fs"/"full_screen"/"fullscreen".
            options: Display options, e.g. {"title": "Update", "countdown": True}.
                "arg_string" and "output_file" may also be given here.
            arg_string: Raw helper arguments appended verbatim after the
                compiled ones. Don't repeat -windowType in it.
            output_file: Redirect the helper's output (its exit code) here.

        Returns:
            The compiled HelperInvocation.

        Raises:
            HelperNotInstalled: If the helper binary is not executable.
            InvalidWindowType: If window_type is not recognised.
            InvalidOptionValue: If an option value is outside its domain,
                or an option is unknown and strict mode is on.
        """
        if not self.installed():
            raise HelperNotInstalled(str(self._settings.helper_path))

        kind = WindowType.parse(window_type)
        options = options or {}

        args: list[str] = [STARTUP_FLAG, "-windowType", kind.value]
        for name, value in options.items():
            if name in CONTROL_KEYS:
                continue
            spec = self._registry.get(name)
            if spec is None:
                if self._strict:
                    raise InvalidOptionValue(name, value, "unknown dialog option")
                logger.debug("Ignoring unknown dialog option %r", name)
                continue
            args.extend(spec.compile(name, value))

        if arg_string is None:
            arg_string = options.get("arg_string")
        if output_file is None:
            output_file = options.get("output_file")

        return HelperInvocation(
            program=self._settings.helper_path,
            args=tuple(args),
            arg_string=arg_string or None,
            output_file=Path(output_file) if output_file else None,
        )


class DialogRunner:
    """
    Shows dialogs, either inline or abandoned to run on their own.

    Example:
        >>> runner = DialogRunner()
        >>> runner.show("hud", {"title": "Restart", "button1": "OK"})
        0
    """

    def __init__(
        self,
        compiler: DialogCompiler | None = None,
        *,
        passthrough: PassthroughExecution | None = None,
        detached: DetachedExecution | None = None,
    ) -> None:
        self._compiler = compiler or DialogCompiler()
        self._passthrough = passthrough or PassthroughExecution()
        self._detached = detached or DetachedExecution()

    @property
    def compiler(self) -> DialogCompiler:
        return self._compiler

    def show(
        self,
        window_type: WindowType | str = WindowType.HUD,
        options: Mapping[str, Any] | None = None,
        *,
        abandon_process: bool | None = None,
        arg_string: str | None = None,
        output_file: str | Path | None = None,
    ) -> int | DetachedProcess:
        """
        Display a dialog.

        Args:
            window_type: See DialogCompiler.compile.
            options: Display options. May also carry "abandon_process",
                "arg_string" and "output_file".
            abandon_process: Don't wait for the user. The helper keeps running
                and a DetachedProcess is returned; use output_file to learn
                the result later.
            arg_string: Raw helper arguments.
            output_file: Where the helper's output is saved.

        Returns:
            The helper's exit status, or a DetachedProcess when abandoned.
        """
        options = options or {}
        invocation = self._compiler.compile(
            window_type, options, arg_string=arg_string, output_file=output_file
        )
        if abandon_process is None:
            abandon_process = bool(options.get("abandon_process"))

        if abandon_process:
            return self._detached.run(invocation.command_line, output_file=invocation.output_file)
        return self._passthrough.run(invocation.command_line)
