#!/usr/bin/env python3
"""Unit tests for the console's persistent settings."""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock

from bouncer_admin.settings import INFIX_KEY, ModuleSettings


class TestModuleSettings(unittest.TestCase):
    """Test cases for ModuleSettings."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.state_file = os.path.join(self.temp_dir, "admin_state.json")
        self.user = Mock(status_prefix="*")
        self.user.name = "alice"

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_missing_state_file(self):
        """Test that a missing state file starts empty."""
        settings = ModuleSettings(self.state_file)
        self.assertEqual(settings.values, {})
        self.assertEqual(settings.get_nv("alice", INFIX_KEY), "")

    def test_infix_falls_back_to_status_prefix(self):
        """Test the infix default."""
        settings = ModuleSettings(self.state_file)
        self.assertEqual(settings.get_infix(self.user), "*")

        self.user.status_prefix = "!"
        self.assertEqual(settings.get_infix(self.user), "!")

    def test_infix_persists(self):
        """Test that the infix survives a reload of the state file."""
        ModuleSettings(self.state_file).set_infix(self.user, "admin.")

        reloaded = ModuleSettings(self.state_file)

        self.assertEqual(reloaded.get_infix(self.user), "admin.")

    def test_reset_infix(self):
        """Test that resetting removes the stored value."""
        settings = ModuleSettings(self.state_file)
        settings.set_infix(self.user, "admin.")

        settings.reset_infix(self.user)

        self.assertEqual(settings.get_infix(self.user), "*")
        self.assertEqual(ModuleSettings(self.state_file).values, {})

    def test_save_keeps_other_state(self):
        """Test that saving preserves unrelated keys of the state file."""
        with open(self.state_file, "w") as f:
            json.dump({"other": [1, 2]}, f)

        ModuleSettings(self.state_file).set_nv("bob", "key", "value")

        with open(self.state_file, "r") as f:
            state = json.load(f)
        self.assertEqual(state["other"], [1, 2])
        self.assertEqual(state["settings"], {"bob": {"key": "value"}})

    def test_in_memory(self):
        """Test settings without a state file."""
        settings = ModuleSettings()
        settings.set_infix(self.user, "x")
        self.assertEqual(settings.get_infix(self.user), "x")
        self.assertEqual(os.listdir(self.temp_dir), [])


if __name__ == "__main__":
    unittest.main()
