"""Command context for execution.

This module provides the CommandContext class that encapsulates
the execution environment for commands and variable accessors.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..formatters import ReplyChannel
    from ..host import Service, User
    from ..scopes import Session
    from ..settings import ModuleSettings


class CommandContext:
    """Context passed to command execution and variable accessors.

    Encapsulates everything a command or variable needs, so that no
    closure reaches back into console state.

    Attributes:
        session: Caller's user and current network
        service: Global service
        settings: Console key/value settings
        reply: Reply channel of the current dispatch
    """

    def __init__(
        self,
        session: "Session",
        service: "Service",
        settings: "ModuleSettings",
        reply: "ReplyChannel",
    ):
        """Initialize command context.

        Args:
            session: Caller's user and current network
            service: Global service
            settings: Console key/value settings
            reply: Reply channel of the current dispatch
        """
        self.session = session
        self.service = service
        self.settings = settings
        self.reply = reply

    @property
    def principal(self) -> "User":
        """Get the acting user."""
        return self.session.user
