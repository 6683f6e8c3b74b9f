"""Interface definitions for the bouncer admin console.

Provides Protocol types for the host collaborators the console depends on.
The address resolver and the dispatcher only ever talk to these interfaces;
``bouncer_admin.host`` provides the in-memory implementation.
All interfaces use runtime_checkable for isinstance() checks.

Example:
    from interfaces import IService, IReplySink

    def reply(sink: IReplySink, target: str, lines: List[str]):
        for line in lines:
            sink.put_module(target, line)
"""

from typing import Iterable, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IPrincipal(Protocol):
    """The identity a command is executed on behalf of."""

    @property
    def name(self) -> str:
        """Get the unique principal name.

        Returns:
            User name of the principal
        """
        ...

    @property
    def is_admin(self) -> bool:
        """Whether the principal has admin rights.

        Returns:
            True for admins
        """
        ...

    @property
    def deny_set_bind_host(self) -> bool:
        """Whether the principal is denied bind host changes.

        Returns:
            True if bind host changes are denied
        """
        ...

    @property
    def deny_load_mod(self) -> bool:
        """Whether the principal is denied loading modules.

        Returns:
            True if module loading is denied
        """
        ...


@runtime_checkable
class IChannel(Protocol):
    """Channel record owned by exactly one network."""

    @property
    def name(self) -> str:
        """Get the channel name, including its prefix.

        Returns:
            Channel name such as '#znc'
        """
        ...

    @property
    def network(self) -> "INetwork":
        """Get the owning network.

        Returns:
            Network the channel belongs to
        """
        ...


@runtime_checkable
class INetwork(Protocol):
    """Network record owned by exactly one user."""

    @property
    def name(self) -> str:
        """Get the network name.

        Returns:
            Network name
        """
        ...

    @property
    def user(self) -> "IUser":
        """Get the owning user.

        Returns:
            User the network belongs to
        """
        ...

    def find_channel(self, name: str) -> Optional[IChannel]:
        """Find a channel of this network.

        Args:
            name: Channel name (case-insensitive)

        Returns:
            Channel or None if not found
        """
        ...


@runtime_checkable
class IUser(IPrincipal, Protocol):
    """User record. A user is also the principal of its own commands."""

    @property
    def networks(self) -> List[INetwork]:
        """Get the networks of the user in creation order.

        Returns:
            List of networks
        """
        ...

    @property
    def status_prefix(self) -> str:
        """Get the prefix of status and module queries.

        Returns:
            Status prefix, '*' by default
        """
        ...

    def find_network(self, name: str) -> Optional[INetwork]:
        """Find a network of this user.

        Args:
            name: Network name (case-insensitive)

        Returns:
            Network or None if not found
        """
        ...


@runtime_checkable
class IService(Protocol):
    """The global bouncer service singleton."""

    @property
    def users(self) -> Iterable[IUser]:
        """Get all users.

        Returns:
            Iterable of users
        """
        ...

    def find_user(self, name: str) -> Optional[IUser]:
        """Find a user in the global user directory.

        Args:
            name: Exact user name

        Returns:
            User or None if not found
        """
        ...

    def write_config(self) -> bool:
        """Persist the configuration.

        Returns:
            True if the configuration was written
        """
        ...

    def broadcast(self, message: str) -> None:
        """Send a message to all users.

        Args:
            message: Message text

        Returns:
            None
        """
        ...


@runtime_checkable
class IReplySink(Protocol):
    """Line transport back to the client that issued a command."""

    def put_module(self, target: str, line: str) -> None:
        """Send one line from the query named ``target``.

        Args:
            target: Query name without the status prefix
            line: Text line

        Returns:
            None
        """
        ...
