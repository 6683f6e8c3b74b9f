"""Commands of the user scope."""

import logging

from ..errors import AccessDenied, ConsoleError, UnknownNetwork, UsageError
from ..formatters import Table, format_bytes, wildcmp
from .base import BaseCommand, CommandContext, put_listing, token

logger = logging.getLogger(__name__)


class AddNetworkCommand(BaseCommand):
    """Add a network to a user."""

    syntax = "AddNetwork <name>"
    description = "Adds a network."

    def execute(self, user, args: str, context: CommandContext) -> None:
        if not context.principal.is_admin and not user.has_space_for_new_network():
            raise ConsoleError(f"exceeded limit {user.max_networks}")

        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)
        if not name.isalnum():
            raise ConsoleError("invalid name (must be alphanumeric)")

        try:
            user.add_network(name)
        except ValueError as e:
            raise ConsoleError(str(e))

        logger.info(f"{context.principal.name} added network {user.name}/{name}")
        context.reply.put_success(
            f"network added. Use Jump {name}, or connect with username "
            f"{user.name}/{name} (instead of just {user.name}) to connect to it."
        )


class CloneUserCommand(BaseCommand):
    """Copy all settings of another user."""

    syntax = "CloneUser <user>"
    description = "Clones all attributes from the specified user."

    def execute(self, user, args: str, context: CommandContext) -> None:
        if not context.principal.is_admin:
            raise AccessDenied()
        source_name = token(args, 0)
        if not source_name:
            raise UsageError(self.syntax)

        source = context.service.find_user(source_name)
        if source is None:
            raise ConsoleError("unknown user")

        user.clone(source)
        context.reply.put_success("cloned")


class DelNetworkCommand(BaseCommand):
    """Delete a network of a user."""

    syntax = "DelNetwork <name>"
    description = "Deletes a network."

    def execute(self, user, args: str, context: CommandContext) -> None:
        name = token(args, 0)
        if not name:
            raise UsageError(self.syntax)

        if not user.delete_network(name):
            raise UnknownNetwork()

        logger.info(f"{context.principal.name} deleted network {user.name}/{name}")
        context.reply.put_success(f"network '{name}' deleted")


class ListClientsCommand(BaseCommand):
    """List the clients connected as a user."""

    syntax = "ListClients [filter]"
    description = "Lists connected user clients."

    def execute(self, user, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Host", "Name"])

        for client in user.clients:
            if wildcmp(client.remote_ip, filter_text) or wildcmp(client.full_name, filter_text):
                table.add_row(Host=client.remote_ip, Name=client.full_name)

        put_listing(context, table, filter_text, "No connected clients")


class ListNetworksCommand(BaseCommand):
    """List the networks of a user with their connection status."""

    syntax = "ListNetworks [filter]"
    description = "Lists user networks."

    def execute(self, user, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Network", "Status"])

        for network in user.networks:
            if not wildcmp(network.name, filter_text):
                continue
            if network.is_connected:
                status = f"Online ({network.current_server.name})"
            else:
                status = "Offline" if network.irc_connect_enabled else "Disabled"
            table.add_row(Network=network.name, Status=status)

        put_listing(context, table, filter_text, "No networks")


class UserTrafficCommand(BaseCommand):
    """Show the traffic of each network of a user."""

    syntax = "Traffic"
    description = "Shows the amount of user specific traffic."

    def execute(self, user, args: str, context: CommandContext) -> None:
        table = Table(["Network", "Sent", "Received", "Total"])
        for network in user.networks:
            table.add_row(
                Network=network.name,
                Sent=format_bytes(network.bytes_written),
                Received=format_bytes(network.bytes_read),
                Total=format_bytes(network.bytes_read + network.bytes_written),
            )
        context.reply.put_table_or(table, "No networks")


USER_COMMANDS = (
    AddNetworkCommand,
    CloneUserCommand,
    DelNetworkCommand,
    ListClientsCommand,
    ListNetworksCommand,
    UserTrafficCommand,
)
