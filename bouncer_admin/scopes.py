"""Configuration scopes addressed by console commands."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .interfaces import IChannel, INetwork, IUser


class ScopeKind(Enum):
    """The four nested configuration scopes."""

    GLOBAL = "global"
    USER = "user"
    NETWORK = "network"
    CHANNEL = "channel"


@dataclass(frozen=True)
class Scope:
    """A resolved target: scope kind plus the live host object.

    Attributes:
        kind: Scope kind
        handle: Service, user, network or channel object
    """

    kind: ScopeKind
    handle: Any

    @property
    def owner(self) -> Optional[IUser]:
        """Get the user owning the scope, or None for the global scope."""
        if self.kind == ScopeKind.USER:
            return self.handle
        if self.kind == ScopeKind.NETWORK:
            return self.handle.user
        if self.kind == ScopeKind.CHANNEL:
            return self.handle.network.user
        return None


@dataclass
class Session:
    """The caller's side of one dispatch.

    Attributes:
        user: Acting user, also the principal
        network: Network the client is attached to, if any
    """

    user: IUser
    network: Optional[INetwork] = None

    def find_channel(self, name: str) -> Optional[IChannel]:
        """Find a channel on the current network.

        Args:
            name: Channel name

        Returns:
            Channel or None when not found or detached from any network
        """
        if self.network is None:
            return None
        return self.network.find_channel(name)
