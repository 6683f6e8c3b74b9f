"""Command system for the bouncer admin console.

This package provides the free-form commands of each scope kind.
All commands inherit from BaseCommand and are registered with CommandRegistry.

Example:
    from commands import build_registries

    registries = build_registries()
    command = registries[ScopeKind.NETWORK].get("connect")
    command.execute(network, "", context)
"""

from typing import Dict

from ..scopes import ScopeKind
from .base import BaseCommand, put_listing, token
from .context import CommandContext
from .global_commands import GLOBAL_COMMANDS
from .module_commands import MODULE_COMMANDS, create_module_commands
from .network_commands import NETWORK_COMMANDS
from .registry import CommandRegistry
from .user_commands import USER_COMMANDS


def build_registries() -> Dict[ScopeKind, CommandRegistry]:
    """Build one command registry per scope kind.

    Returns:
        Registries keyed by scope kind; the channel scope has no commands
    """
    tables = {
        ScopeKind.GLOBAL: list(GLOBAL_COMMANDS) + create_module_commands("global"),
        ScopeKind.USER: list(USER_COMMANDS) + create_module_commands("user"),
        ScopeKind.NETWORK: list(NETWORK_COMMANDS) + create_module_commands("network"),
        ScopeKind.CHANNEL: [],
    }

    registries = {}
    for kind, command_classes in tables.items():
        registry = CommandRegistry(kind.value)
        for command_class in command_classes:
            registry.register(command_class)
        registries[kind] = registry
    return registries


__all__ = [
    "BaseCommand",
    "CommandContext",
    "CommandRegistry",
    "build_registries",
    "create_module_commands",
    "put_listing",
    "token",
    "GLOBAL_COMMANDS",
    "MODULE_COMMANDS",
    "NETWORK_COMMANDS",
    "USER_COMMANDS",
]
