"""Privilege policy for agent commands."""

from mdmshell.security.policy import (
    ROOTLESS_AGENT_COMMANDS,
    PrivilegePolicy,
    is_superuser,
)

__all__ = ["ROOTLESS_AGENT_COMMANDS", "PrivilegePolicy", "is_superuser"]
