"""Base classes for the command system.

This module provides the foundation for the free-form commands of each
scope, including the abstract base class and argument tokenizing.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..formatters import Table
from .context import CommandContext


def token(line: str, index: int, rest: bool = False) -> str:
    """Get a whitespace separated token of a line.

    Args:
        line: Text to split; runs of whitespace count as one separator
        index: Zero based token index
        rest: Return the remainder of the line starting at the token

    Returns:
        The token, or an empty string if the line is too short
    """
    if rest:
        parts = line.split(None, index)
        return parts[index].rstrip() if len(parts) > index else ""
    parts = line.split()
    return parts[index] if len(parts) > index else ""


def put_listing(context: CommandContext, table: Table, filter_text: str, nothing: str) -> None:
    """Send a listing table, or say why it is empty.

    Args:
        context: Execution context
        table: Table of listed items
        filter_text: Filter the listing was built with
        nothing: Line sent for an empty listing without a filter
    """
    if filter_text:
        context.reply.put_table_or(table, f"No matches for '{filter_text}'")
    else:
        context.reply.put_table_or(table, nothing)


class BaseCommand(ABC):
    """Abstract base class for all commands.

    A command is bound to one scope kind. Its syntax doubles as help text;
    the first word of the syntax is the verb it is dispatched by. Commands
    validate their own arguments and report through ``context.reply``.

    Example:
        class BroadcastCommand(BaseCommand):
            syntax = "Broadcast <message>"
            description = "Broadcasts a message to all users."

            def execute(self, target, args, context):
                ...
    """

    syntax: str = ""
    description: str = ""

    @property
    def name(self) -> str:
        """Get the verb of the command."""
        return token(self.syntax, 0)

    @abstractmethod
    def execute(self, target: Any, args: str, context: CommandContext) -> None:
        """Execute the command.

        Args:
            target: Service, user or network the command is run against
            args: Command arguments (everything after the verb)
            context: Execution context with all dependencies

        Returns:
            None
        """
        pass
