"""Permission checks for variables and global commands.

Variable checks depend only on the variable's flags and the principal.
Whether the principal may touch the addressed scope at all is checked by
the console before any verb runs.
"""

from enum import Flag, auto

from .interfaces import IPrincipal

# verbs a non-admin may run against the global scope
READ_ONLY_VERBS = ("help", "get", "list")


class Permission(Flag):
    """Per-variable permission flags."""

    NONE = 0
    REQUIRES_ADMIN = auto()
    REQUIRES_BIND_HOST_POLICY = auto()


def authorize(principal: IPrincipal, variable) -> bool:
    """Check whether a principal may modify a variable.

    Args:
        principal: Acting principal
        variable: Variable descriptor carrying permission ``flags``

    Returns:
        True if the modification is allowed
    """
    flags = variable.flags
    if Permission.REQUIRES_ADMIN in flags and not principal.is_admin:
        return False
    if Permission.REQUIRES_BIND_HOST_POLICY in flags:
        if not principal.is_admin and principal.deny_set_bind_host:
            return False
    return True


def authorize_global_verb(principal: IPrincipal, verb: str) -> bool:
    """Check whether a principal may run a verb against the global scope.

    Args:
        principal: Acting principal
        verb: First token of the command line

    Returns:
        True if the verb is allowed
    """
    return principal.is_admin or verb.lower() in READ_ONLY_VERBS


def may_load_modules(principal: IPrincipal) -> bool:
    """Check whether a principal may load, reload or unload modules."""
    return principal.is_admin or not principal.deny_load_mod
