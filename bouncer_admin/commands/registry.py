"""Command registry for managing and dispatching commands.

This module provides one registry per scope kind, enabling lookup of
free-form commands by verb and filtering for help output.
"""

import logging
from typing import Dict, List, Optional, Type

from ..formatters import matches_filter
from .base import BaseCommand

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Registry for the commands of one scope kind.

    Verbs are matched case-insensitively. Registration order is kept.

    Example:
        registry = CommandRegistry("network")
        registry.register(ConnectCommand)

        command = registry.get("connect")
        if command:
            command.execute(network, args, context)
    """

    def __init__(self, scope: str):
        """Initialize empty registry.

        Args:
            scope: Scope kind name, used for logging
        """
        self.scope = scope
        self._commands: Dict[str, BaseCommand] = {}

    def register(self, command_class: Type[BaseCommand]) -> bool:
        """Register a command class.

        Args:
            command_class: The command class to instantiate and register

        Returns:
            True if registration succeeded, False if the verb is taken
        """
        instance = command_class()
        key = instance.name.lower()

        if not key:
            logger.error(f"Command {command_class.__name__} has no syntax")
            return False
        if key in self._commands:
            logger.error(f"Duplicate {self.scope} command: {instance.name}")
            return False

        self._commands[key] = instance
        logger.debug(f"Registered {self.scope} command: {instance.name}")
        return True

    def get(self, name: str) -> Optional[BaseCommand]:
        """Get a command by verb.

        Args:
            name: Command verb, any case

        Returns:
            Command instance or None if not found
        """
        return self._commands.get(name.lower())

    def list_commands(self) -> List[str]:
        """List all registered verbs.

        Returns:
            Verbs in registration order
        """
        return [command.name for command in self._commands.values()]

    def filter(self, filter_text: str = "") -> List[BaseCommand]:
        """List commands whose verb matches a filter by prefix or wildcard.

        Args:
            filter_text: Optional filter, empty matches all

        Returns:
            Matching commands
        """
        return [
            command
            for command in self._commands.values()
            if matches_filter(command.name, filter_text)
        ]
