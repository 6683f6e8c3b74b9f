"""Commands of the global service scope.

Commands for managing users and listener ports, configuration files,
broadcasts and the service lifecycle.
"""

import logging

from ..errors import AccessDenied, ConsoleError, RestartRequested, ShutdownRequested, UsageError
from ..formatters import Table, format_bytes, wildcmp
from ..host import ACCEPT_TYPES, ADDR_TYPES, Listener
from .base import BaseCommand, CommandContext, put_listing, token

logger = logging.getLogger(__name__)

FORCE_FLAG = "--force"


def _parse_port(text: str):
    """Parse ``[+]port`` into (port, ssl); port is 0 when invalid."""
    ssl = text.startswith("+")
    digits = text[1:] if ssl else text
    port = int(digits) if digits.isdecimal() and int(digits) < 65536 else 0
    return port, ssl


class AddPortCommand(BaseCommand):
    """Add a listener port."""

    syntax = "AddPort <[+]port> <ipv4|ipv6|all> <web|irc|all> [bindhost [uriprefix]]"
    description = "Adds a new port."

    def execute(self, service, args: str, context: CommandContext) -> None:
        port, ssl = _parse_port(token(args, 0))
        addr_type = token(args, 1).lower()
        accept_type = token(args, 2).lower()

        if not port or addr_type not in ADDR_TYPES or accept_type not in ACCEPT_TYPES:
            raise UsageError(self.syntax)

        listener = Listener(
            port=port,
            bind_host=token(args, 3),
            uri_prefix=token(args, 4),
            ssl=ssl,
            addr_type=addr_type,
            accept_type=accept_type,
        )
        if not service.add_listener(listener):
            raise ConsoleError("port already in use")

        logger.info(f"{context.principal.name} added port {port}")
        context.reply.put_success("port added")


class AddUserCommand(BaseCommand):
    """Add a user with a password."""

    syntax = "AddUser <username> <password>"
    description = "Adds a new user."

    def execute(self, service, args: str, context: CommandContext) -> None:
        username = token(args, 0)
        password = token(args, 1)
        if not password:
            raise UsageError(self.syntax)

        if service.find_user(username):
            raise ConsoleError(f"user '{username}' already exists")

        user = service.new_user(username)
        user.set_password(password)
        try:
            service.add_user(user)
        except ValueError as e:
            raise ConsoleError(str(e))
        context.reply.put_success(f"user '{username}' added")


class BroadcastCommand(BaseCommand):
    """Send a message to all users."""

    syntax = "Broadcast <message>"
    description = "Broadcasts a message to all users."

    def execute(self, service, args: str, context: CommandContext) -> None:
        if not args:
            raise UsageError(self.syntax)
        service.broadcast(args)


class DelPortCommand(BaseCommand):
    """Delete a listener port."""

    syntax = "DelPort <[+]port> <ipv4|ipv6|all> [bindhost]"
    description = "Deletes a port."

    def execute(self, service, args: str, context: CommandContext) -> None:
        port, _ = _parse_port(token(args, 0))
        addr_type = token(args, 1).lower()
        if not port or addr_type not in ADDR_TYPES:
            raise UsageError(self.syntax)

        listener = service.find_listener(port, token(args, 2), addr_type)
        if listener is None:
            raise ConsoleError("no matching port")

        service.del_listener(listener)
        logger.info(f"{context.principal.name} deleted port {port}")
        context.reply.put_success("port deleted")


class DelUserCommand(BaseCommand):
    """Delete a user other than oneself."""

    syntax = "DelUser <username>"
    description = "Deletes a user."

    def execute(self, service, args: str, context: CommandContext) -> None:
        username = token(args, 0)
        if not username:
            raise UsageError(self.syntax)

        user = service.find_user(username)
        if user is None:
            raise ConsoleError(f"user '{username}' doesn't exist")
        if user is context.principal:
            raise AccessDenied()

        if not service.delete_user(username):
            raise ConsoleError("internal error")
        context.reply.put_success(f"user '{username}' deleted")


class ListUsersCommand(BaseCommand):
    """List users with their network and client counts."""

    syntax = "ListUsers [filter]"
    description = "Lists all users."

    def execute(self, service, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Username", "Networks", "Clients"])

        for user in service.users:
            if wildcmp(user.name, filter_text):
                table.add_row(
                    Username=user.name,
                    Networks=str(len(user.networks)),
                    Clients=str(len(user.clients)),
                )

        put_listing(context, table, filter_text, "No users")


class ListPortsCommand(BaseCommand):
    """List listener ports and their options."""

    syntax = "ListPorts [filter]"
    description = "Lists all ports."

    @staticmethod
    def _options(listener: Listener):
        options = [listener.bind_host or "*"]
        if listener.addr_type in ("ipv6", "all"):
            options.append("IPv6")
        if listener.addr_type in ("ipv4", "all"):
            options.append("IPv4")
        if listener.accept_type in ("irc", "all"):
            options.append("IRC")
        if listener.accept_type in ("web", "all"):
            options.append("WEB")
            if listener.uri_prefix:
                options.append(listener.uri_prefix + "/")
        return options

    def execute(self, service, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Port", "Options"])

        for listener in service.listeners:
            options = self._options(listener)
            if filter_text:
                port_match = wildcmp(str(listener.port), filter_text.lstrip("+"))
                option_match = any(option.lower() == filter_text.lower() for option in options)
                if not port_match and not option_match:
                    continue
            port = f"+{listener.port}" if listener.ssl else str(listener.port)
            table.add_row(Port=port, Options=", ".join(options))

        put_listing(context, table, filter_text, "No ports")


class RehashCommand(BaseCommand):
    """Re-read the configuration file."""

    syntax = "Rehash"
    description = "Reloads the configuration file."

    def execute(self, service, args: str, context: CommandContext) -> None:
        if not service.rehash():
            raise ConsoleError(f"failed to read '{service.config_file}'")
        context.reply.put_success(f"read '{service.config_file}'")


class SaveConfigCommand(BaseCommand):
    """Write the configuration file."""

    syntax = "SaveConfig"
    description = "Saves the configuration file."

    def execute(self, service, args: str, context: CommandContext) -> None:
        if not service.write_config():
            raise ConsoleError(f"failed to write '{service.config_file}'")
        context.reply.put_success(f"wrote '{service.config_file}'")


class _LifecycleCommand(BaseCommand):
    """Save the configuration, broadcast a message and stop the service.

    Saving must succeed unless ``--force`` is given.
    """

    default_message = ""
    exception_class = RestartRequested

    def execute(self, service, args: str, context: CommandContext) -> None:
        force = token(args, 0).lower() == FORCE_FLAG
        message = token(args, 1 if force else 0, rest=True) or self.default_message

        if not service.write_config() and not force:
            context.reply.put_error("saving config failed")
            context.reply.put_line(f"Aborting. Use {FORCE_FLAG} to ignore.")
            return

        logger.warning(f"{context.principal.name} requested {self.name}: {message}")
        service.broadcast(message)
        raise self.exception_class(message)


class RestartCommand(_LifecycleCommand):
    syntax = "Restart [--force] [message]"
    description = "Restarts the bouncer."
    default_message = "The bouncer is being restarted NOW!"
    exception_class = RestartRequested


class ShutdownCommand(_LifecycleCommand):
    syntax = "Shutdown [--force] [message]"
    description = "Shuts down the bouncer."
    default_message = "The bouncer is being shut down NOW!"
    exception_class = ShutdownRequested


class GlobalTrafficCommand(BaseCommand):
    """Show the traffic of every user."""

    syntax = "Traffic"
    description = "Shows the amount of traffic."

    def execute(self, service, args: str, context: CommandContext) -> None:
        table = Table(["User", "Sent", "Received", "Total"])
        for user in service.users:
            table.add_row(
                User=user.name,
                Sent=format_bytes(user.bytes_written),
                Received=format_bytes(user.bytes_read),
                Total=format_bytes(user.bytes_read + user.bytes_written),
            )
        context.reply.put_table_or(table, "No users")


class UpdateModCommand(BaseCommand):
    """Reload every loaded instance of a module."""

    syntax = "UpdateMod <module>"
    description = "Reloads all instances of a module."

    def execute(self, service, args: str, context: CommandContext) -> None:
        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)

        try:
            service.modules.get_module_info(name)
        except ValueError as e:
            raise ConsoleError(str(e))

        if not service.update_module(name):
            raise ConsoleError(f"module '{name}' not updated")
        context.reply.put_success(f"module '{name}' updated")


GLOBAL_COMMANDS = (
    AddPortCommand,
    AddUserCommand,
    BroadcastCommand,
    DelPortCommand,
    DelUserCommand,
    ListUsersCommand,
    ListPortsCommand,
    RehashCommand,
    RestartCommand,
    SaveConfigCommand,
    ShutdownCommand,
    GlobalTrafficCommand,
    UpdateModCommand,
)
