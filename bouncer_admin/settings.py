"""Persistent key/value settings of the admin console.

The only setting is the query infix, stored per user. It is read at lookup
time and falls back to the user's status prefix when unset.
"""

import json
import logging
from typing import Dict, Optional

from .interfaces import IUser

logger = logging.getLogger(__name__)

INFIX_KEY = "infix"


class ModuleSettings:
    """Per-user key/value store backed by a JSON state file."""

    def __init__(self, state_file: Optional[str] = None):
        """Initialize settings.

        Args:
            state_file: Path of the JSON state file, or None to keep
                settings in memory only
        """
        self.state_file = state_file
        self.values: Dict[str, Dict[str, str]] = {}
        self._load_state()

    def _load_state(self) -> None:
        """Load all settings from the state file.

        Raises:
            json.JSONDecodeError: If state file contains invalid JSON.
        """
        if not self.state_file:
            return
        try:
            with open(self.state_file, "r") as f:
                state = json.load(f)
                self.values = state.get("settings", {})
                logger.info(f"Loaded settings for {len(self.values)} user(s)")
        except FileNotFoundError:
            self.values = {}

    def _save_state(self) -> None:
        """Save all settings to the state file."""
        if not self.state_file:
            return
        try:
            try:
                with open(self.state_file, "r") as f:
                    state = json.load(f)
            except FileNotFoundError:
                state = {}

            state["settings"] = self.values

            with open(self.state_file, "w") as f:
                json.dump(state, f, indent=2)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save state: {e}")

    def get_nv(self, user_name: str, key: str) -> str:
        """Get a stored value.

        Args:
            user_name: Owner of the setting
            key: Setting name

        Returns:
            Stored value, or an empty string if unset
        """
        return self.values.get(user_name, {}).get(key, "")

    def set_nv(self, user_name: str, key: str, value: str) -> None:
        """Store a value and persist the state.

        Args:
            user_name: Owner of the setting
            key: Setting name
            value: Value to store

        Returns:
            None
        """
        self.values.setdefault(user_name, {})[key] = value
        self._save_state()

    def del_nv(self, user_name: str, key: str) -> None:
        user_values = self.values.get(user_name, {})
        if user_values.pop(key, None) is not None:
            if not user_values:
                del self.values[user_name]
            self._save_state()

    def get_infix(self, user: IUser) -> str:
        """Get the query infix of a user.

        Args:
            user: User whose console queries are addressed

        Returns:
            Stored infix, or the user's status prefix when unset
        """
        return self.get_nv(user.name, INFIX_KEY) or user.status_prefix

    def set_infix(self, user: IUser, infix: str) -> None:
        self.set_nv(user.name, INFIX_KEY, infix)

    def reset_infix(self, user: IUser) -> None:
        self.del_nv(user.name, INFIX_KEY)
