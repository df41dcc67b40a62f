"""
Top-level facade for mdmshell.
"""

from mdmshell._types import (
    CommandResult,
    DetachedProcess,
    HelperOutcome,
    HelperResponse,
    MachineIdentity,
    WindowType,
    read_helper_output,
)
from mdmshell.agent import AgentCommandBuilder, AgentRunner
from mdmshell.api import ManagedClient, create_client
from mdmshell.dialog import DialogCompiler, DialogRunner, HelperInvocation
from mdmshell.discovery import EnvironmentProbe
from mdmshell.errors import (
    AgentNotInstalled,
    HelperNotInstalled,
    InsufficientPrivilege,
    InvalidArguments,
    InvalidOptionValue,
    InvalidWindowType,
    MdmShellError,
    NetworkUnavailable,
    NoReceiptsFolder,
    RecordNotFound,
)
from mdmshell.networking import NetworkProbe
from mdmshell.preferences import ConfigurationResolver, ServerLocation
from mdmshell.security import ROOTLESS_AGENT_COMMANDS, PrivilegePolicy
from mdmshell.settings import ClientSettings

__version__ = "0.1.0"

__all__ = [
    "create_client",
    "ManagedClient",
    "ClientSettings",
    "AgentCommandBuilder",
    "AgentRunner",
    "DialogCompiler",
    "DialogRunner",
    "HelperInvocation",
    "EnvironmentProbe",
    "NetworkProbe",
    "ConfigurationResolver",
    "ServerLocation",
    "PrivilegePolicy",
    "ROOTLESS_AGENT_COMMANDS",
    "CommandResult",
    "DetachedProcess",
    "HelperOutcome",
    "HelperResponse",
    "MachineIdentity",
    "WindowType",
    "read_helper_output",
    "MdmShellError",
    "AgentNotInstalled",
    "HelperNotInstalled",
    "InsufficientPrivilege",
    "InvalidArguments",
    "InvalidOptionValue",
    "InvalidWindowType",
    "NetworkUnavailable",
    "NoReceiptsFolder",
    "RecordNotFound",
]
