"""Commands of the network scope.

Commands for the server list, the connection state and the channels of a
network.
"""

import logging

from ..errors import AccessDenied, ConsoleError, UnknownNetwork, UsageError
from ..formatters import Table, format_bytes, wildcmp
from .base import BaseCommand, CommandContext, put_listing, token

logger = logging.getLogger(__name__)


class AddServerCommand(BaseCommand):
    """Add an IRC server to a network."""

    syntax = "AddServer <host> [[+]port] [pass]"
    description = "Adds an IRC server."

    def execute(self, network, args: str, context: CommandContext) -> None:
        if not args:
            raise UsageError(self.syntax)

        if not network.add_server(args):
            raise ConsoleError("duplicate or invalid entry")
        context.reply.put_success("server added")


class CloneNetworkCommand(BaseCommand):
    """Copy the settings of another network, possibly of another user."""

    syntax = "CloneNetwork <network> [user]"
    description = "Clones all attributes from the specified network."

    def execute(self, network, args: str, context: CommandContext) -> None:
        source_name = token(args, 0)
        if not source_name:
            raise UsageError(self.syntax)

        username = token(args, 1)
        owner = context.service.find_user(username) if username else network.user

        if owner is not context.principal and not context.principal.is_admin:
            raise AccessDenied()
        if owner is None:
            raise ConsoleError("unknown user")

        source = owner.find_network(source_name)
        if source is None:
            raise UnknownNetwork()

        network.clone(source)
        context.reply.put_success("cloned")


class ConnectCommand(BaseCommand):
    """Connect to a given server, or jump to the next one."""

    syntax = "Connect [server]"
    description = "Connects to an IRC server."

    def execute(self, network, args: str, context: CommandContext) -> None:
        server = None
        if args:
            server = network.find_server(args)
            if server is None:
                raise ConsoleError("unknown server")

        was_connected = network.is_connected
        network.connect(server)

        if server is not None:
            context.reply.put_line(f"Connecting to '{server.name}'...")
        elif was_connected:
            context.reply.put_line("Jumping to the next server on the list...")
        else:
            context.reply.put_line("Connecting...")


class DelServerCommand(BaseCommand):
    """Delete an IRC server from a network."""

    syntax = "DelServer <host> [[+]port] [pass]"
    description = "Deletes an IRC server."

    def execute(self, network, args: str, context: CommandContext) -> None:
        if not args:
            raise UsageError(self.syntax)

        port_text = token(args, 1).lstrip("+")
        port = int(port_text) if port_text.isdecimal() else 0

        if not network.servers:
            raise ConsoleError("no servers")
        if not network.del_server(token(args, 0), port, token(args, 2)):
            raise ConsoleError("no such server")
        context.reply.put_success("server deleted")


class DisconnectCommand(BaseCommand):
    """Disconnect from IRC and stop reconnecting."""

    syntax = "Disconnect [message]"
    description = "Disconnects from the IRC server."

    def execute(self, network, args: str, context: CommandContext) -> None:
        if not network.disconnect(args):
            raise ConsoleError("not connected")
        context.reply.put_line("Disconnected")


class ListChansCommand(BaseCommand):
    """List the channels of a network with their status."""

    syntax = "ListChans [filter]"
    description = "Lists all channels of the network."

    def execute(self, network, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Channel", "Status"])

        for channel in network.channels:
            if wildcmp(channel.name, filter_text):
                table.add_row(Channel=channel.perm_str + channel.name, Status=channel.status)

        put_listing(context, table, filter_text, "No channels")


class ListServersCommand(BaseCommand):
    """List the servers of a network, marking the current one."""

    syntax = "ListServers [filter]"
    description = "Lists IRC servers of the network."

    def execute(self, network, args: str, context: CommandContext) -> None:
        filter_text = token(args, 0)
        table = Table(["Server"])

        for server in network.servers:
            if not wildcmp(server.name, filter_text):
                continue
            cell = f"{server.name}:{'+' if server.ssl else ''}{server.port}"
            if server is network.current_server:
                cell += " (current)"
            table.add_row(Server=cell)

        put_listing(context, table, filter_text, "No servers")


class NetworkTrafficCommand(BaseCommand):
    syntax = "Traffic"
    description = "Shows the amount of network specific traffic."

    def execute(self, network, args: str, context: CommandContext) -> None:
        table = Table(["Sent", "Received", "Total"])
        table.add_row(
            Sent=format_bytes(network.bytes_written),
            Received=format_bytes(network.bytes_read),
            Total=format_bytes(network.bytes_read + network.bytes_written),
        )
        context.reply.put_table(table)


NETWORK_COMMANDS = (
    AddServerCommand,
    CloneNetworkCommand,
    ConnectCommand,
    DelServerCommand,
    DisconnectCommand,
    ListChansCommand,
    ListServersCommand,
    NetworkTrafficCommand,
)
