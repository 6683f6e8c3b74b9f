"""Module management commands.

ListMods, LoadMod, ReloadMod and UnloadMod work the same way on the global
service, a user and a network; each scope registers its own variants built
by ``create_module_commands``.
"""

import logging
from typing import List, Type

from ..errors import AccessDenied, ConsoleError, UsageError
from ..formatters import Table, matches_filter
from ..permissions import may_load_modules
from .base import BaseCommand, CommandContext, token

logger = logging.getLogger(__name__)


def _check_module_access(context: CommandContext) -> None:
    if not may_load_modules(context.principal):
        logger.info(f"Module access denied for {context.principal.name}")
        raise AccessDenied()


class ListModsCommand(BaseCommand):
    """List the modules available to a scope."""

    syntax = "ListMods [filter]"
    description = "Lists {} modules."

    def execute(self, target, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Module", "Description"])

        for info in target.modules.available_modules():
            if not matches_filter(info.name, filter_text):
                continue
            name = info.name
            if target.modules.find_module(name):
                name += " (loaded)"
            table.add_row(Module=name, Description=info.description)

        if table.empty:
            raise ConsoleError(f"no matches for '{filter_text}'")
        context.reply.put_table(table)


class LoadModCommand(BaseCommand):
    """Load a module into a scope."""

    syntax = "LoadMod <module> [args]"
    description = "Loads a {} module."

    def execute(self, target, args: str, context: CommandContext) -> None:
        _check_module_access(context)

        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)

        try:
            target.modules.load_module(name, token(args, 1, rest=True))
        except ValueError as e:
            raise ConsoleError(str(e))
        context.reply.put_success(f"module '{name}' loaded")


class ReloadModCommand(BaseCommand):
    """Reload a module of a scope with new arguments."""

    syntax = "ReloadMod <module> [args]"
    description = "Reloads a {} module."

    def execute(self, target, args: str, context: CommandContext) -> None:
        _check_module_access(context)

        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)

        try:
            target.modules.get_module_info(name)
            target.modules.reload_module(name, token(args, 1, rest=True))
        except ValueError as e:
            raise ConsoleError(str(e))
        context.reply.put_success(f"module '{name}' reloaded")


class UnloadModCommand(BaseCommand):
    """Unload a module from a scope."""

    syntax = "UnloadMod <module> [args]"
    description = "Unloads a {} module."

    def execute(self, target, args: str, context: CommandContext) -> None:
        _check_module_access(context)

        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)

        try:
            target.modules.get_module_info(name)
            target.modules.unload_module(name)
        except ValueError as e:
            raise ConsoleError(str(e))
        context.reply.put_success(f"module '{name}' unloaded")


MODULE_COMMANDS = (ListModsCommand, LoadModCommand, ReloadModCommand, UnloadModCommand)


def create_module_commands(module_type: str) -> List[Type[BaseCommand]]:
    """Create the module commands of one scope.

    Args:
        module_type: 'global', 'user' or 'network', used in descriptions

    Returns:
        Command classes ready for registration
    """
    return [
        type(
            f"{module_type.title()}{command_class.__name__}",
            (command_class,),
            {"description": command_class.description.format(module_type)},
        )
        for command_class in MODULE_COMMANDS
    ]
