#!/usr/bin/env python3
"""Unit tests for variable descriptors and the per-scope tables."""

import unittest
from types import SimpleNamespace
from unittest.mock import Mock

from bouncer_admin.errors import ResetUnsupported, ValidationError
from bouncer_admin.host import Service
from bouncer_admin.permissions import Permission
from bouncer_admin.scopes import ScopeKind
from bouncer_admin.settings import ModuleSettings
from bouncer_admin.variables import VARIABLES, VarType, create_attribute_variable, find_variables
from bouncer_admin.variables.base import format_double, to_bool, to_double, to_uint


class TestValueParsing(unittest.TestCase):
    """Test cases for value parsing and formatting."""

    def test_to_bool(self):
        """Test the lenient boolean parser."""
        for text in ("", "0", "000", "false", "OFF", "no", "N"):
            self.assertFalse(to_bool(text), text)
        for text in ("1", "true", "yes", "on", "anything"):
            self.assertTrue(to_bool(text), text)

    def test_to_uint(self):
        """Test that only non-negative integers are accepted."""
        self.assertEqual(to_uint("42"), 42)
        self.assertEqual(to_uint(" 7 "), 7)
        for text in ("-1", "abc", "1.5", "", "\u00b2"):
            with self.assertRaises(ValidationError) as ctx:
                to_uint(text)
            self.assertEqual(str(ctx.exception), "invalid integer")

    def test_to_double(self):
        """Test number parsing and two decimal output."""
        self.assertEqual(to_double("1.5"), 1.5)
        self.assertEqual(format_double(1.0), "1.00")
        with self.assertRaises(ValidationError) as ctx:
            to_double("fast")
        self.assertEqual(str(ctx.exception), "invalid number")

    def test_to_double_rejects_non_finite(self):
        """Test that infinity and NaN are not numbers."""
        for text in ("inf", "-Infinity", "nan"):
            with self.assertRaises(ValidationError, msg=text):
                to_double(text)


class TestAttributeVariable(unittest.TestCase):
    """Test cases for create_attribute_variable."""

    def setUp(self):
        """Set up test fixtures."""
        self.target = SimpleNamespace(enabled=True, count=3)
        self.context = Mock()

    def test_round_trip_canonicalizes(self):
        """Test that Set then Get returns the canonical form."""
        variable = create_attribute_variable("Enabled", VarType.BOOLEAN, "enabled", "", True)

        variable.set(self.context, self.target, "off")

        self.assertIs(self.target.enabled, False)
        self.assertEqual(variable.get(self.context, self.target), "false")

    def test_reset_restores_default(self):
        """Test that Reset restores the declared default."""
        variable = create_attribute_variable("Count", VarType.INTEGER, "count", "", 10)
        variable.reset(self.context, self.target)
        self.assertEqual(self.target.count, 10)

    def test_reset_unsupported(self):
        """Test that variables without a default cannot be reset."""
        variable = create_attribute_variable("Count", VarType.INTEGER, "count", "")

        self.assertFalse(variable.can_reset)
        with self.assertRaises(ResetUnsupported):
            variable.reset(self.context, self.target)
        self.assertEqual(self.target.count, 3)

    def test_invalid_value_leaves_target(self):
        """Test that a rejected value does not change the target."""
        variable = create_attribute_variable("Count", VarType.INTEGER, "count", "", 10)
        with self.assertRaises(ValidationError):
            variable.set(self.context, self.target, "many")
        self.assertEqual(self.target.count, 3)

    def test_list_type_rejected(self):
        """Test that list variables need explicit accessors."""
        with self.assertRaises(ValueError):
            create_attribute_variable("Hosts", VarType.LIST, "hosts", "")

    def test_label(self):
        """Test the List cell of a variable."""
        variable = create_attribute_variable("Count", VarType.INTEGER, "count", "")
        self.assertEqual(variable.label, "Count (Integer)")


class TestVariableTables(unittest.TestCase):
    """Test cases for the per-scope variable tables."""

    def test_names_unique_per_scope(self):
        """Test that names are unique per scope kind, ignoring case."""
        for kind, variables in VARIABLES.items():
            names = [variable.name.lower() for variable in variables]
            self.assertEqual(len(names), len(set(names)), kind)

    def test_every_scope_has_a_table(self):
        """Test that each scope kind has a non-empty table."""
        for kind in ScopeKind:
            self.assertTrue(VARIABLES[kind])

    def test_flags(self):
        """Test the permission flags of protected user variables."""
        flags = {variable.name: variable.flags for variable in VARIABLES[ScopeKind.USER]}
        for name in ("Admin", "DenyLoadMod", "DenySetBindHost", "MaxNetworks"):
            self.assertEqual(flags[name], Permission.REQUIRES_ADMIN, name)
        for name in ("BindHost", "DCCBindHost"):
            self.assertEqual(flags[name], Permission.REQUIRES_BIND_HOST_POLICY, name)
        self.assertEqual(flags["Nick"], Permission.NONE)

        network_flags = {variable.name: variable.flags for variable in VARIABLES[ScopeKind.NETWORK]}
        self.assertEqual(network_flags["BindHost"], Permission.REQUIRES_BIND_HOST_POLICY)

    def test_find_variables(self):
        """Test wildcard selection in table order."""
        names = [v.name for v in find_variables(VARIABLES[ScopeKind.USER], "*nick")]
        self.assertEqual(names, ["AltNick", "Nick"])


class TestRoundTrip(unittest.TestCase):
    """Test Set then Get for every variable against the host objects."""

    TYPE_VALUES = {
        VarType.BOOLEAN: ("off", "false"),
        VarType.INTEGER: ("7", "7"),
        VarType.DOUBLE: ("2.5", "2.50"),
        VarType.STRING: ("value1", "value1"),
        VarType.LIST: ("value1", "value1"),
    }
    NAME_VALUES = {"CTCPReply": ("version test", "VERSION test")}

    def make_targets(self):
        service = Service()
        user = service.new_user("alice")
        service.add_user(user)
        network = user.add_network("freenode")
        channel = network.add_channel("#znc")
        context = Mock(service=service, settings=ModuleSettings())
        targets = {
            ScopeKind.GLOBAL: service,
            ScopeKind.USER: user,
            ScopeKind.NETWORK: network,
            ScopeKind.CHANNEL: channel,
        }
        return context, targets

    def test_set_then_get(self):
        """Test that every variable shows the canonical form of a set value."""
        for kind, variables in VARIABLES.items():
            for variable in variables:
                with self.subTest(scope=kind.value, variable=variable.name):
                    context, targets = self.make_targets()
                    target = targets[kind]
                    value, expected = self.NAME_VALUES.get(
                        variable.name, self.TYPE_VALUES[variable.type]
                    )

                    variable.set(context, target, value)

                    if variable.name == "Password":
                        self.assertTrue(target.check_password(value))
                        self.assertEqual(set(variable.get(context, target)), {"."})
                    else:
                        self.assertEqual(variable.get(context, target), expected)


class TestScopeVariables(unittest.TestCase):
    """Test cases for variables with custom accessors."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = Service()
        self.user = self.service.new_user("alice")
        self.service.add_user(self.user)
        self.network = self.user.add_network("freenode")
        self.channel = self.network.add_channel("#znc")
        self.context = Mock(service=self.service, settings=ModuleSettings())

    def variable(self, kind, name):
        return next(v for v in VARIABLES[kind] if v.name == name)

    def test_ctcp_reply_add_and_remove(self):
        """Test that CTCPReply adds pairs and removes by request."""
        variable = self.variable(ScopeKind.USER, "CTCPReply")

        variable.set(self.context, self.user, "version my client 1.0")
        self.assertEqual(variable.get(self.context, self.user), "VERSION my client 1.0")

        variable.set(self.context, self.user, "VERSION")
        self.assertEqual(variable.get(self.context, self.user), "")

        with self.assertRaises(ValidationError) as ctx:
            variable.set(self.context, self.user, "VERSION")
        self.assertEqual(str(ctx.exception), "unable to remove")

    def test_allow_splits_hosts(self):
        """Test that Allow adds each space separated host once."""
        variable = self.variable(ScopeKind.USER, "Allow")

        variable.set(self.context, self.user, "10.0.0.* 192.168.1.1")
        variable.set(self.context, self.user, "10.0.0.*")

        self.assertEqual(variable.get(self.context, self.user), "10.0.0.*\n192.168.1.1")

    def test_password_masked(self):
        """Test that the password is stored hashed and shown as dots."""
        variable = self.variable(ScopeKind.USER, "Password")

        variable.set(self.context, self.user, "hunter2")

        self.assertTrue(self.user.check_password("hunter2"))
        value = variable.get(self.context, self.user)
        self.assertEqual(value, "." * len(self.user.password_hash))
        self.assertFalse(variable.can_reset)

    def test_admin_infix(self):
        """Test that AdminInfix falls back to the status prefix."""
        variable = self.variable(ScopeKind.USER, "AdminInfix")
        self.assertEqual(variable.get(self.context, self.user), "*")

        variable.set(self.context, self.user, "!")
        self.assertEqual(variable.get(self.context, self.user), "!")

        variable.reset(self.context, self.user)
        self.assertEqual(variable.get(self.context, self.user), "*")

    def test_chan_buffer_size_limit(self):
        """Test that buffer sizes above the maximum need an admin user."""
        variable = self.variable(ScopeKind.USER, "ChanBufferSize")

        with self.assertRaises(ValidationError) as ctx:
            variable.set(self.context, self.user, "999999")
        self.assertEqual(str(ctx.exception), "Setting failed, limit is 500")
        self.assertEqual(self.user.chan_buffer_size, 50)

        self.user.admin = True
        variable.set(self.context, self.user, "999999")
        self.assertEqual(self.user.chan_buffer_size, 999999)

    def test_status_prefix_validation(self):
        """Test that the status prefix must be a single word."""
        variable = self.variable(ScopeKind.USER, "StatusPrefix")
        with self.assertRaises(ValidationError):
            variable.set(self.context, self.user, "a b")
        self.assertEqual(self.user.status_prefix, "*")

    def test_flood_rate_double(self):
        """Test that FloodRate is shown with two decimals."""
        variable = self.variable(ScopeKind.NETWORK, "FloodRate")
        variable.set(self.context, self.network, "2.5")
        self.assertEqual(variable.get(self.context, self.network), "2.50")

    def test_channel_buffer_inherits(self):
        """Test that the channel buffer shows the inherited value as default."""
        variable = self.variable(ScopeKind.CHANNEL, "Buffer")
        self.assertEqual(variable.get(self.context, self.channel), "50 (default)")

        variable.set(self.context, self.channel, "100")
        self.assertEqual(variable.get(self.context, self.channel), "100")

        with self.assertRaises(ValidationError) as ctx:
            variable.set(self.context, self.channel, "501")
        self.assertEqual(str(ctx.exception), "Setting failed, the limit is 500")

        variable.reset(self.context, self.channel)
        self.assertEqual(variable.get(self.context, self.channel), "50 (default)")

    def test_channel_auto_clear_inherits(self):
        """Test that AutoClearChanBuffer follows the user until set."""
        variable = self.variable(ScopeKind.CHANNEL, "AutoClearChanBuffer")
        self.assertEqual(variable.get(self.context, self.channel), "true (default)")

        variable.set(self.context, self.channel, "false")
        self.assertEqual(variable.get(self.context, self.channel), "false")

    def test_channel_detached(self):
        """Test that Detached detaches and Reset attaches."""
        variable = self.variable(ScopeKind.CHANNEL, "Detached")

        variable.set(self.context, self.channel, "yes")
        self.assertTrue(self.channel.detached)

        variable.reset(self.context, self.channel)
        self.assertEqual(variable.get(self.context, self.channel), "false")

    def test_trusted_proxy(self):
        """Test that TrustedProxy accumulates and Reset clears."""
        variable = self.variable(ScopeKind.GLOBAL, "TrustedProxy")

        variable.set(self.context, self.service, "127.0.0.1 ::1")
        self.assertEqual(variable.get(self.context, self.service), "127.0.0.1\n::1")

        variable.reset(self.context, self.service)
        self.assertEqual(variable.get(self.context, self.service), "")


if __name__ == "__main__":
    unittest.main()
