"""Composite address resolution.

Turns a query target such as ``alice``, ``freenode``, ``#znc`` or
``alice/freenode/#znc`` into a scope. Interpretations are tried in a fixed
order and the first match wins:

1. the self keywords ``user`` and ``network``
2. a user name
3. a network of the caller
4. a channel on the caller's current network
5. ``user/network``, ``user/#chan``, ``network/#chan`` and
   ``user/network/#chan``

A user with a single network may leave the network out of ``user/#chan``.
With two or more networks the same address is ambiguous and fails.
"""

import logging
from typing import List, Optional

from .errors import AmbiguousTarget, UnknownChannel, UnknownNetwork, UnknownTarget
from .interfaces import IService, IUser
from .scopes import Scope, ScopeKind, Session

logger = logging.getLogger(__name__)

USER_KEYWORD = "user"
NETWORK_KEYWORD = "network"


class AddressResolver:
    """Resolves query targets against the host directories.

    Example:
        resolver = AddressResolver(service)
        scope = resolver.resolve("alice/freenode", session)
        if scope is None:
            pass  # not addressed to the console
    """

    def __init__(self, service: IService):
        """Initialize resolver.

        Args:
            service: Global service providing the user directory
        """
        self.service = service

    def resolve(self, token: str, session: Session) -> Optional[Scope]:
        """Resolve a target token.

        Args:
            token: Target with prefix and infix already stripped
            session: Caller's user and current network

        Returns:
            Resolved scope, or None if the token is not an address

        Raises:
            AddressError: If the token is an address that cannot be resolved
        """
        caller = session.user

        if token.lower() == USER_KEYWORD:
            return Scope(ScopeKind.USER, caller)
        if token.lower() == NETWORK_KEYWORD and session.network is not None:
            return Scope(ScopeKind.NETWORK, session.network)

        user = self.service.find_user(token)
        if user is not None:
            return Scope(ScopeKind.USER, user)

        network = caller.find_network(token)
        if network is not None:
            return Scope(ScopeKind.NETWORK, network)

        channel = session.find_channel(token)
        if channel is not None:
            return Scope(ScopeKind.CHANNEL, channel)

        parts = [part for part in token.split("/") if part]
        if len(parts) == 2:
            return self._resolve_pair(parts, session)
        if len(parts) == 3:
            return self._resolve_triple(parts)

        logger.debug(f"'{token}' is not an address")
        return None

    def _resolve_pair(self, parts: List[str], session: Session) -> Scope:
        """Resolve ``user/network``, ``user/#chan`` or ``network/#chan``."""
        first, second = parts

        user = self.service.find_user(first)
        if user is not None:
            network = user.find_network(second)
            if network is not None:
                return Scope(ScopeKind.NETWORK, network)

            channel = self._find_user_channel(user, second, session)
            if channel is not None:
                return Scope(ScopeKind.CHANNEL, channel)
            raise AmbiguousTarget()

        network = session.user.find_network(first)
        if network is not None:
            channel = network.find_channel(second)
            if channel is not None:
                return Scope(ScopeKind.CHANNEL, channel)
            raise UnknownChannel()

        raise UnknownTarget()

    def _find_user_channel(self, user: IUser, name: str, session: Session):
        """Find a channel of ``user`` without a network name.

        The caller's current network is searched first when the caller
        addresses itself, then the user's network if it has exactly one.
        """
        if user is session.user:
            channel = session.find_channel(name)
            if channel is not None:
                return channel

        networks = user.networks
        if len(networks) == 1:
            return networks[0].find_channel(name)
        return None

    def _resolve_triple(self, parts: List[str]) -> Scope:
        """Resolve ``user/network/#chan``."""
        user_name, network_name, channel_name = parts

        user = self.service.find_user(user_name)
        if user is None:
            raise UnknownTarget("unknown user")

        network = user.find_network(network_name)
        if network is None:
            raise UnknownNetwork()

        channel = network.find_channel(channel_name)
        if channel is None:
            raise UnknownChannel()

        return Scope(ScopeKind.CHANNEL, channel)
