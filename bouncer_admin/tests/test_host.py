#!/usr/bin/env python3
"""Unit tests for the in-memory bouncer object model."""

import os
import shutil
import tempfile
import unittest

from bouncer_admin.host import Listener, Server, Service


class TestServer(unittest.TestCase):
    """Test cases for Server parsing."""

    def test_from_line(self):
        """Test parsing host, SSL port and password."""
        server = Server.from_line("irc.example.net +6697 secret")
        self.assertEqual(server.host, "irc.example.net")
        self.assertEqual(server.port, 6697)
        self.assertTrue(server.ssl)
        self.assertEqual(server.password, "secret")
        self.assertEqual(server.to_line(), "irc.example.net +6697 secret")

    def test_default_port(self):
        """Test that the port defaults to 6667."""
        server = Server.from_line("irc.example.net")
        self.assertEqual(server.port, 6667)
        self.assertFalse(server.ssl)

    def test_invalid_port_falls_back(self):
        """Test that a digit-like port is treated as missing."""
        self.assertEqual(Server.from_line("irc.example.net ²").port, 6667)


class TestObjectModel(unittest.TestCase):
    """Test cases for users, networks and channels."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = Service()
        self.user = self.service.new_user("alice")
        self.service.add_user(self.user)
        self.network = self.user.add_network("freenode")

    def test_add_user_validation(self):
        """Test that invalid and duplicate user names are rejected."""
        with self.assertRaises(ValueError):
            self.service.add_user(self.service.new_user("bad name"))
        with self.assertRaises(ValueError):
            self.service.add_user(self.service.new_user("alice"))

    def test_add_network_validation(self):
        """Test that network names must be alphanumeric and unique."""
        with self.assertRaises(ValueError):
            self.user.add_network("free-node")
        with self.assertRaises(ValueError):
            self.user.add_network("FREENODE")

    def test_connect_rotates_servers(self):
        """Test that connecting without a server jumps to the next one."""
        self.network.add_server("a.example.net")
        self.network.add_server("b.example.net")

        self.network.connect()
        self.assertEqual(self.network.current_server.host, "a.example.net")
        self.network.connect()
        self.assertEqual(self.network.current_server.host, "b.example.net")

        self.assertTrue(self.network.disconnect("bye"))
        self.assertFalse(self.network.is_connected)
        self.assertFalse(self.network.irc_connect_enabled)
        self.assertFalse(self.network.disconnect())

    def test_duplicate_server(self):
        """Test that the same server cannot be added twice."""
        self.assertTrue(self.network.add_server("a.example.net 6667"))
        self.assertFalse(self.network.add_server("a.example.net"))
        self.assertFalse(self.network.add_server(""))

    def test_channel_buffer_fallback(self):
        """Test that a channel inherits the user's buffer size."""
        channel = self.network.add_channel("#znc")
        self.assertEqual(channel.buffer_count, 50)

        self.user.chan_buffer_size = 80
        self.assertEqual(channel.buffer_count, 80)
        self.assertFalse(channel.has_buffer_count_set)

        self.assertFalse(channel.set_buffer_count(1000))
        self.assertTrue(channel.set_buffer_count(1000, force=True))
        self.assertEqual(channel.buffer_count, 1000)

    def test_update_module(self):
        """Test reloading every instance of a module."""
        self.network.modules.load_module("log")
        self.assertTrue(self.service.update_module("log"))
        self.assertFalse(self.service.update_module("perform"))


class TestConfiguration(unittest.TestCase):
    """Test cases for reading and writing the YAML configuration."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "bouncer.yml")

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_missing_file_starts_empty(self):
        """Test that a missing configuration yields an empty service."""
        service = Service.from_config(self.config_file)
        self.assertEqual(service.users, [])
        self.assertEqual(service.config_file, self.config_file)

    def test_invalid_file(self):
        """Test that an unreadable configuration is an error."""
        with open(self.config_file, "w") as f:
            f.write("users: [unclosed\n")

        with self.assertRaises(ValueError):
            Service.from_config(self.config_file)

    def test_round_trip(self):
        """Test that a written configuration reads back the same."""
        service = Service(self.config_file)
        service.motd.append("welcome")
        service.add_listener(Listener(port=6697, ssl=True))
        user = service.new_user("alice")
        service.add_user(user)
        user.admin = True
        user.set_password("secret")
        network = user.add_network("freenode")
        network.add_server("chat.freenode.net +6697")
        channel = network.add_channel("#znc")
        channel.key = "hunter2"
        channel.set_buffer_count(100)

        self.assertTrue(service.write_config())
        loaded = Service.from_config(self.config_file)

        self.assertEqual(loaded.motd, ["welcome"])
        self.assertEqual(loaded.listeners, [Listener(port=6697, ssl=True)])
        alice = loaded.find_user("alice")
        self.assertTrue(alice.is_admin)
        self.assertTrue(alice.check_password("secret"))
        freenode = alice.find_network("freenode")
        self.assertEqual(freenode.servers[0].to_line(), "chat.freenode.net +6697")
        loaded_channel = freenode.find_channel("#ZNC")
        self.assertEqual(loaded_channel.key, "hunter2")
        self.assertEqual(loaded_channel.buffer_count, 100)
        self.assertTrue(loaded_channel.has_buffer_count_set)

    def test_rehash_removes_deleted_users(self):
        """Test that rehashing drops users no longer configured."""
        with open(self.config_file, "w") as f:
            f.write("users:\n  alice: {}\n")
        service = Service.from_config(self.config_file)
        service.add_user(service.new_user("bob"))

        self.assertTrue(service.rehash())

        self.assertEqual([user.name for user in service.users], ["alice"])


if __name__ == "__main__":
    unittest.main()
