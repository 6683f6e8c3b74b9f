#!/usr/bin/env python3
"""Unit tests for composite address resolution.

Usage:
    python -m pytest bouncer_admin/tests/test_address.py
"""

import unittest

from bouncer_admin.address import AddressResolver
from bouncer_admin.errors import AmbiguousTarget, UnknownChannel, UnknownNetwork, UnknownTarget
from bouncer_admin.host import Service
from bouncer_admin.scopes import ScopeKind, Session


class TestAddressResolver(unittest.TestCase):
    """Test cases for AddressResolver."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = Service()
        self.alice = self.service.new_user("alice")
        self.alice.max_networks = 5
        self.service.add_user(self.alice)
        self.freenode = self.alice.add_network("freenode")
        self.chan = self.freenode.add_channel("#znc")

        self.bob = self.service.new_user("bob")
        self.service.add_user(self.bob)

        self.resolver = AddressResolver(self.service)
        self.session = Session(user=self.alice, network=self.freenode)

    def test_self_keywords(self):
        """Test that 'user' and 'network' address the caller's own scopes."""
        scope = self.resolver.resolve("user", self.session)
        self.assertEqual(scope.kind, ScopeKind.USER)
        self.assertIs(scope.handle, self.alice)

        scope = self.resolver.resolve("network", self.session)
        self.assertEqual(scope.kind, ScopeKind.NETWORK)
        self.assertIs(scope.handle, self.freenode)

    def test_network_keyword_without_current_network(self):
        """Test that 'network' is not an address without a current network."""
        session = Session(user=self.alice)
        self.assertIsNone(self.resolver.resolve("network", session))

    def test_user_name(self):
        """Test resolving another user by name."""
        scope = self.resolver.resolve("bob", self.session)
        self.assertEqual(scope.kind, ScopeKind.USER)
        self.assertIs(scope.handle, self.bob)
        self.assertIs(scope.owner, self.bob)

    def test_user_name_wins_over_network_name(self):
        """Test that a user name takes priority over a network of the caller."""
        namesake = self.service.new_user("freenode")
        self.service.add_user(namesake)

        scope = self.resolver.resolve("freenode", self.session)

        self.assertEqual(scope.kind, ScopeKind.USER)
        self.assertIs(scope.handle, namesake)

    def test_network_name_ignores_case(self):
        """Test resolving a network of the caller by name."""
        scope = self.resolver.resolve("FreeNode", self.session)
        self.assertEqual(scope.kind, ScopeKind.NETWORK)
        self.assertIs(scope.handle, self.freenode)
        self.assertIs(scope.owner, self.alice)

    def test_channel_on_current_network(self):
        """Test resolving a bare channel on the current network."""
        scope = self.resolver.resolve("#znc", self.session)
        self.assertEqual(scope.kind, ScopeKind.CHANNEL)
        self.assertIs(scope.handle, self.chan)
        self.assertIs(scope.owner, self.alice)

    def test_channel_without_current_network(self):
        """Test that a bare channel needs a current network."""
        session = Session(user=self.alice)
        self.assertIsNone(self.resolver.resolve("#znc", session))

    def test_user_network(self):
        """Test resolving user/network."""
        scope = self.resolver.resolve("alice/freenode", Session(user=self.bob))
        self.assertEqual(scope.kind, ScopeKind.NETWORK)
        self.assertIs(scope.handle, self.freenode)

    def test_user_channel_single_network(self):
        """Test that user/#chan resolves through the user's only network."""
        scope = self.resolver.resolve("alice/#znc", Session(user=self.bob))
        self.assertEqual(scope.kind, ScopeKind.CHANNEL)
        self.assertIs(scope.handle, self.chan)

    def test_user_channel_ambiguous_with_second_network(self):
        """Test that user/#chan fails once the user has two networks."""
        efnet = self.alice.add_network("efnet")
        efnet.add_channel("#znc")

        with self.assertRaises(AmbiguousTarget) as ctx:
            self.resolver.resolve("alice/#znc", Session(user=self.bob))

        self.assertEqual(str(ctx.exception), "unknown (or ambiguous) network or channel")

    def test_own_channel_on_current_network_with_two_networks(self):
        """Test that the caller's current network disambiguates user/#chan."""
        self.alice.add_network("efnet")

        scope = self.resolver.resolve("alice/#znc", self.session)

        self.assertIs(scope.handle, self.chan)

    def test_network_channel(self):
        """Test resolving network/#chan on a network of the caller."""
        scope = self.resolver.resolve("freenode/#znc", Session(user=self.alice))
        self.assertEqual(scope.kind, ScopeKind.CHANNEL)
        self.assertIs(scope.handle, self.chan)

    def test_network_unknown_channel(self):
        """Test network/#chan with a channel that does not exist."""
        with self.assertRaises(UnknownChannel):
            self.resolver.resolve("freenode/#nope", self.session)

    def test_unknown_pair(self):
        """Test a pair whose first segment is neither user nor network."""
        with self.assertRaises(UnknownTarget) as ctx:
            self.resolver.resolve("nobody/#znc", self.session)

        self.assertEqual(str(ctx.exception), "unknown target")

    def test_triple(self):
        """Test resolving user/network/#chan."""
        scope = self.resolver.resolve("alice/freenode/#znc", Session(user=self.bob))
        self.assertEqual(scope.kind, ScopeKind.CHANNEL)
        self.assertIs(scope.handle, self.chan)

    def test_triple_failures(self):
        """Test the error of each missing segment of a triple."""
        with self.assertRaises(UnknownTarget) as ctx:
            self.resolver.resolve("nobody/freenode/#znc", self.session)
        self.assertEqual(str(ctx.exception), "unknown user")

        with self.assertRaises(UnknownNetwork):
            self.resolver.resolve("alice/efnet/#znc", self.session)

        with self.assertRaises(UnknownChannel):
            self.resolver.resolve("alice/freenode/#nope", self.session)

    def test_not_an_address(self):
        """Test tokens that are not for the console."""
        self.assertIsNone(self.resolver.resolve("status", self.session))
        self.assertIsNone(self.resolver.resolve("a/b/c/d", self.session))
        self.assertIsNone(self.resolver.resolve("", self.session))


if __name__ == "__main__":
    unittest.main()
