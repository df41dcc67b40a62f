"""Dialog helper support."""

from mdmshell.dialog.compiler import DialogCompiler, DialogRunner, HelperInvocation
from mdmshell.dialog.options import (
    ALIGNMENTS,
    OPTION_REGISTRY,
    WINDOW_POSITIONS,
    OptionKind,
    OptionSpec,
)

__all__ = [
    "ALIGNMENTS",
    "OPTION_REGISTRY",
    "WINDOW_POSITIONS",
    "DialogCompiler",
    "DialogRunner",
    "HelperInvocation",
    "OptionKind",
    "OptionSpec",
]
