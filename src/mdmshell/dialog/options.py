"""
Display options understood by the dialog helper.

Each option name maps to an OptionSpec: a flag plus the rule that validates
and formats its value. Compiling a dialog is a walk over this registry.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from mdmshell.errors import InvalidOptionValue


class OptionKind(Enum):
    """Validation domain of a display option."""

    TEXT = "text"  # Any value, rendered with str(); None leaves the flag out
    ENUMERATED = "enumerated"  # One of a fixed set of tokens
    PRESENCE = "presence"  # Flag only, emitted when the value is truthy
    FLAG = "flag"  # Flag only, emitted whatever the value
    BUTTON = "button"  # Button number, 1 or 2
    MULTI_VALUE = "multi_value"  # Comma-joined integers


WINDOW_POSITIONS: tuple[str, ...] = ("ul", "ll", "ur", "lr")
ALIGNMENTS: tuple[str, ...] = ("right", "left", "center", "justified", "natural")
BUTTONS: tuple[int, ...] = (1, 2)


def _token(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lstrip(":")


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """How one display option turns into helper arguments."""

    flag: str
    kind: OptionKind
    choices: tuple[Any, ...] = ()
    optional: bool = False  # ENUMERATED only: None means "leave at the helper default"

    def compile(self, name: str, value: Any) -> list[str]:
        """
        Validate a value and return the argument tokens it contributes.

        Raises:
            InvalidOptionValue: If the value is outside this option's domain.
        """
        if self.kind is OptionKind.PRESENCE:
            return [self.flag] if value else []

        if self.kind is OptionKind.FLAG:
            return [self.flag]

        if self.kind is OptionKind.ENUMERATED:
            if value is None and self.optional:
                return []
            token = _token(value) if value is not None else ""
            if token not in self.choices:
                raise InvalidOptionValue(name, value, f"must be one of {', '.join(self.choices)}")
            return [self.flag, token]

        if self.kind is OptionKind.BUTTON:
            if isinstance(value, bool) or value not in self.choices:
                raise InvalidOptionValue(
                    name, value, f"must be one of {', '.join(str(c) for c in self.choices)}"
                )
            return [self.flag, str(value)]

        if self.kind is OptionKind.MULTI_VALUE:
            return [self.flag, join_delay_options(name, value)]

        if value is None:
            return []
        return [self.flag, str(value)]


def join_delay_options(name: str, value: Any) -> str:
    """
    Normalize delay choices to the helper's "n1, n2, ..." form.

    Accepts a comma-separated string or a sequence of integers; both
    "5,10, 15" and [5, 10, 15] become "5, 10, 15".
    """
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, Sequence):
        items = [str(v).strip() for v in value]
    else:
        raise InvalidOptionValue(name, value, "must be a comma-separated string or a list of integers")

    for item in items:
        if not item.isdigit():
            raise InvalidOptionValue(name, value, f"{item!r} is not a whole number of seconds")
    if not items:
        raise InvalidOptionValue(name, value, "needs at least one delay")
    return ", ".join(items)


OPTION_REGISTRY: dict[str, OptionSpec] = {
    "window_position": OptionSpec("-windowPosition", OptionKind.ENUMERATED, WINDOW_POSITIONS, optional=True),
    "title": OptionSpec("-title", OptionKind.TEXT),
    "heading": OptionSpec("-heading", OptionKind.TEXT),
    "align_heading": OptionSpec("-alignHeading", OptionKind.ENUMERATED, ALIGNMENTS),
    "description": OptionSpec("-description", OptionKind.TEXT),
    "align_description": OptionSpec("-alignDescription", OptionKind.ENUMERATED, ALIGNMENTS),
    "icon": OptionSpec("-icon", OptionKind.TEXT),
    "icon_size": OptionSpec("-iconSize", OptionKind.TEXT),
    "full_screen_icon": OptionSpec("-fullScreenIcon", OptionKind.FLAG),
    "button1": OptionSpec("-button1", OptionKind.TEXT),
    "button2": OptionSpec("-button2", OptionKind.TEXT),
    "default_button": OptionSpec("-defaultButton", OptionKind.BUTTON, BUTTONS),
    "cancel_button": OptionSpec("-cancelButton", OptionKind.BUTTON, BUTTONS),
    "timeout": OptionSpec("-timeout", OptionKind.TEXT),
    "show_delay_options": OptionSpec("-showDelayOptions", OptionKind.MULTI_VALUE),
    "countdown": OptionSpec("-countdown", OptionKind.PRESENCE),
    "align_countdown": OptionSpec("-alignCountdown", OptionKind.ENUMERATED, ALIGNMENTS),
    "lock_hud": OptionSpec("-lockHUD", OptionKind.PRESENCE),
}
