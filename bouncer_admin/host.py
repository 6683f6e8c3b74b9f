"""In-memory bouncer object model.

Provides the service, users, networks and channels the console operates on,
together with listeners, IRC servers, clients and a module catalogue. The
model performs no networking: connecting a network only updates its state.

The configuration is a YAML document:

    max_buffer_size: 500
    listeners:
      - {port: 6697, ssl: true}
    users:
      alice:
        admin: true
        networks:
          freenode:
            servers: ["chat.freenode.net +6697"]
            channels:
              "#znc": {key: secret}
"""

import hashlib
import logging
import os
import secrets
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

ADDR_TYPES = ("ipv4", "ipv6", "all")
ACCEPT_TYPES = ("irc", "web", "all")


@dataclass(frozen=True)
class ModuleInfo:
    """Module catalogue entry.

    Attributes:
        name: Module name
        description: One line description
        types: Module types the module can be loaded as
    """

    name: str
    description: str
    types: Tuple[str, ...] = ("user",)


DEFAULT_MODULES = (
    ModuleInfo("admin", "Administer the bouncer conveniently through IRC.", ("user",)),
    ModuleInfo("autoattach", "Reattaches you to channels on activity.", ("user", "network")),
    ModuleInfo("log", "Writes IRC logs.", ("global", "user", "network")),
    ModuleInfo("nickserv", "Auths you with NickServ.", ("network",)),
    ModuleInfo("perform", "Keeps a list of commands to be executed on connect.", ("user", "network")),
    ModuleInfo("webadmin", "Web based administration module.", ("global", "user")),
)


class ModuleManager:
    """Modules loaded into one service, user or network.

    Example:
        modules = ModuleManager("network", catalog)
        modules.load_module("nickserv", "")
    """

    def __init__(self, module_type: str, catalog: Dict[str, ModuleInfo]):
        """Initialize module manager.

        Args:
            module_type: 'global', 'user' or 'network'
            catalog: Shared catalogue of available modules
        """
        self.module_type = module_type
        self.catalog = catalog
        self.loaded: Dict[str, str] = {}

    def available_modules(self) -> List[ModuleInfo]:
        """List catalogue modules that can be loaded into this manager."""
        return sorted(
            (info for info in self.catalog.values() if self.module_type in info.types),
            key=lambda info: info.name,
        )

    def find_module(self, name: str) -> bool:
        return name in self.loaded

    def get_module_info(self, name: str) -> ModuleInfo:
        """Get catalogue information for a module.

        Args:
            name: Module name

        Returns:
            Module information

        Raises:
            ValueError: If the module does not exist
        """
        info = self.catalog.get(name)
        if info is None:
            raise ValueError(f"Unable to find module [{name}]")
        return info

    def load_module(self, name: str, args: str = "") -> None:
        info = self.get_module_info(name)
        if self.module_type not in info.types:
            raise ValueError(f"Module [{name}] does not support module type [{self.module_type}].")
        if name in self.loaded:
            raise ValueError(f"Module [{name}] already loaded.")
        self.loaded[name] = args
        logger.info(f"Loaded {self.module_type} module '{name}'")

    def reload_module(self, name: str, args: str = "") -> None:
        if name not in self.loaded:
            raise ValueError(f"Module [{name}] not loaded.")
        self.loaded[name] = args
        logger.info(f"Reloaded {self.module_type} module '{name}'")

    def unload_module(self, name: str) -> None:
        if name not in self.loaded:
            raise ValueError(f"Module [{name}] not loaded.")
        del self.loaded[name]
        logger.info(f"Unloaded {self.module_type} module '{name}'")


@dataclass
class Listener:
    """A port the service listens on."""

    port: int
    bind_host: str = ""
    uri_prefix: str = ""
    ssl: bool = False
    addr_type: str = "all"
    accept_type: str = "all"


@dataclass
class Server:
    """An IRC server of a network."""

    host: str
    port: int = 6667
    ssl: bool = False
    password: str = ""

    @property
    def name(self) -> str:
        return self.host

    def to_line(self) -> str:
        line = f"{self.host} {'+' if self.ssl else ''}{self.port}"
        if self.password:
            line += f" {self.password}"
        return line

    @classmethod
    def from_line(cls, line: str) -> "Server":
        """Parse ``host [[+]port] [pass]``.

        Args:
            line: Server specification

        Returns:
            Server instance
        """
        tokens = line.split()
        host = tokens[0] if tokens else ""
        port_text = tokens[1] if len(tokens) > 1 else ""
        ssl = port_text.startswith("+")
        port_text = port_text.lstrip("+")
        port = int(port_text) if port_text.isdecimal() else 0
        return cls(
            host=host,
            port=port or 6667,
            ssl=ssl,
            password=" ".join(tokens[2:]),
        )


@dataclass
class Client:
    """A connected IRC client."""

    remote_ip: str
    full_name: str


def _dump_fields(obj: Any, names: Iterable[str]) -> Dict[str, Any]:
    return {name: getattr(obj, name) for name in names}


def _load_fields(obj: Any, data: Dict[str, Any], names: Iterable[str]) -> None:
    for name in names:
        if name in data:
            setattr(obj, name, data[name])


def _sync_children(parent: Any, data: Dict[str, Any], existing, add, delete) -> None:
    """Bring a named child collection in line with configuration data."""
    for name in [child.name for child in existing]:
        if name not in data:
            delete(name)
    for name, child_data in data.items():
        child = parent.find_child(name)
        if child is None:
            child = add(name)
        child.load(child_data or {})


class Channel:
    """A channel of a network."""

    FIELDS = ("key", "default_modes", "detached", "disabled", "in_config")

    def __init__(self, network: "Network", name: str):
        self.network = network
        self.name = name
        self.key = ""
        self.default_modes = ""
        self.detached = False
        self.disabled = False
        self.in_config = True
        self.joined = False
        self.perm_str = ""
        self._buffer_count: Optional[int] = None
        self._auto_clear_chan_buffer: Optional[bool] = None

    @property
    def buffer_count(self) -> int:
        if self._buffer_count is None:
            return self.network.user.chan_buffer_size
        return self._buffer_count

    @property
    def has_buffer_count_set(self) -> bool:
        return self._buffer_count is not None

    def set_buffer_count(self, count: int, force: bool = False) -> bool:
        """Set the channel specific buffer size.

        Args:
            count: Number of lines
            force: Whether the global maximum may be exceeded

        Returns:
            False if the count exceeds the maximum buffer size
        """
        if not force and count > self.network.user.service.max_buffer_size:
            return False
        self._buffer_count = count
        return True

    def reset_buffer_count(self) -> None:
        self._buffer_count = None

    @property
    def auto_clear_chan_buffer(self) -> bool:
        if self._auto_clear_chan_buffer is None:
            return self.network.user.auto_clear_chan_buffer
        return self._auto_clear_chan_buffer

    @auto_clear_chan_buffer.setter
    def auto_clear_chan_buffer(self, value: bool) -> None:
        self._auto_clear_chan_buffer = value

    @property
    def has_auto_clear_chan_buffer_set(self) -> bool:
        return self._auto_clear_chan_buffer is not None

    def reset_auto_clear_chan_buffer(self) -> None:
        self._auto_clear_chan_buffer = None

    def detach(self) -> None:
        self.detached = True

    def attach(self) -> None:
        self.detached = False

    def disable(self) -> None:
        self.disabled = True
        self.joined = False

    def enable(self) -> None:
        self.disabled = False

    @property
    def status(self) -> str:
        if self.joined:
            return "Detached" if self.detached else "Joined"
        return "Disabled" if self.disabled else "Trying"

    def load(self, data: Dict[str, Any]) -> None:
        _load_fields(self, data, self.FIELDS)
        self._buffer_count = data.get("buffer")
        self._auto_clear_chan_buffer = data.get("auto_clear_chan_buffer")

    def to_dict(self) -> Dict[str, Any]:
        data = _dump_fields(self, self.FIELDS)
        if self._buffer_count is not None:
            data["buffer"] = self._buffer_count
        if self._auto_clear_chan_buffer is not None:
            data["auto_clear_chan_buffer"] = self._auto_clear_chan_buffer
        return data


class Network:
    """An IRC network of a user."""

    FIELDS = (
        "alt_nick",
        "bind_host",
        "encoding",
        "flood_burst",
        "flood_rate",
        "ident",
        "join_delay",
        "nick",
        "quit_msg",
        "real_name",
        "trusted_fingerprints",
        "irc_connect_enabled",
    )

    def __init__(self, user: "User", name: str):
        self.user = user
        self.name = name
        self.alt_nick = ""
        self.bind_host = ""
        self.encoding = ""
        self.flood_burst = 4
        self.flood_rate = 1.0
        self.ident = ""
        self.join_delay = 0
        self.nick = ""
        self.quit_msg = ""
        self.real_name = ""
        self.trusted_fingerprints: List[str] = []
        self.irc_connect_enabled = True
        self.channels: List[Channel] = []
        self.servers: List[Server] = []
        self.current_server: Optional[Server] = None
        self.modules = ModuleManager("network", user.service.catalog)
        self.bytes_read = 0
        self.bytes_written = 0

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return bool(name) and name.isalnum()

    @property
    def is_connected(self) -> bool:
        return self.current_server is not None

    def find_channel(self, name: str) -> Optional[Channel]:
        for channel in self.channels:
            if channel.name.lower() == name.lower():
                return channel
        return None

    find_child = find_channel

    def add_channel(self, name: str) -> Channel:
        channel = self.find_channel(name)
        if channel is None:
            channel = Channel(self, name)
            self.channels.append(channel)
        return channel

    def delete_channel(self, name: str) -> bool:
        channel = self.find_channel(name)
        if channel is None:
            return False
        self.channels.remove(channel)
        return True

    def add_server(self, line: str) -> bool:
        """Add an IRC server.

        Args:
            line: ``host [[+]port] [pass]``

        Returns:
            False for a duplicate or invalid entry
        """
        server = Server.from_line(line)
        if not server.host:
            return False
        if server in self.servers:
            return False
        self.servers.append(server)
        return True

    def find_server(self, name: str) -> Optional[Server]:
        for server in self.servers:
            if server.name.lower() == name.lower():
                return server
        return None

    def del_server(self, host: str, port: int = 0, password: str = "") -> bool:
        """Delete the first server matching host, and port/password if given."""
        for server in self.servers:
            if server.host.lower() != host.lower():
                continue
            if port and server.port != port:
                continue
            if password and server.password != password:
                continue
            self.servers.remove(server)
            if server is self.current_server:
                self.current_server = None
            return True
        return False

    def connect(self, server: Optional[Server] = None) -> None:
        """Connect to ``server``, or jump to the next server on the list."""
        self.irc_connect_enabled = True
        if server is None and self.servers:
            index = 0
            if self.current_server in self.servers:
                index = (self.servers.index(self.current_server) + 1) % len(self.servers)
            server = self.servers[index]
        self.current_server = server
        logger.info(f"Network '{self.user.name}/{self.name}' connecting to {server}")

    def disconnect(self, message: str = "") -> bool:
        """Disconnect from IRC and disable reconnecting.

        Returns:
            True if the network was connected
        """
        was_connected = self.is_connected
        self.current_server = None
        self.irc_connect_enabled = False
        for channel in self.channels:
            channel.joined = False
        if was_connected:
            logger.info(f"Network '{self.user.name}/{self.name}' quit: {message}")
        return was_connected

    def clone(self, source: "Network") -> None:
        """Copy settings, servers and channels of another network."""
        _load_fields(self, source.to_dict(), self.FIELDS)
        self.trusted_fingerprints = list(source.trusted_fingerprints)
        self.servers = [Server(**asdict(server)) for server in source.servers]
        for channel in source.channels:
            self.add_channel(channel.name).load(channel.to_dict())

    def load(self, data: Dict[str, Any]) -> None:
        _load_fields(self, data, self.FIELDS)
        self.trusted_fingerprints = list(data.get("trusted_fingerprints") or [])
        self.servers = []
        for line in data.get("servers") or []:
            self.add_server(line)
        for name in data.get("modules") or []:
            self.modules.loaded.setdefault(name, "")
        _sync_children(
            self,
            data.get("channels") or {},
            self.channels,
            self.add_channel,
            self.delete_channel,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _dump_fields(self, self.FIELDS)
        data["servers"] = [server.to_line() for server in self.servers]
        data["modules"] = sorted(self.modules.loaded)
        data["channels"] = {channel.name: channel.to_dict() for channel in self.channels}
        return data


class User:
    """A bouncer user. Users are also the principals commands run as."""

    FIELDS = (
        "admin",
        "allowed_hosts",
        "alt_nick",
        "append_timestamp",
        "auto_clear_chan_buffer",
        "auto_clear_query_buffer",
        "bind_host",
        "chan_buffer_size",
        "chan_modes",
        "client_encoding",
        "ctcp_replies",
        "dcc_bind_host",
        "deny_load_mod",
        "deny_set_bind_host",
        "ident",
        "join_tries",
        "max_joins",
        "max_networks",
        "max_query_buffers",
        "multi_clients",
        "nick",
        "password_hash",
        "password_salt",
        "prepend_timestamp",
        "query_buffer_size",
        "quit_msg",
        "real_name",
        "skin",
        "status_prefix",
        "timestamp_format",
        "timezone",
    )

    def __init__(self, service: "Service", name: str):
        self.service = service
        self.name = name
        self.admin = False
        self.allowed_hosts: List[str] = []
        self.alt_nick = ""
        self.append_timestamp = False
        self.auto_clear_chan_buffer = True
        self.auto_clear_query_buffer = True
        self.bind_host = ""
        self.chan_buffer_size = 50
        self.chan_modes = ""
        self.client_encoding = ""
        self.ctcp_replies: Dict[str, str] = {}
        self.dcc_bind_host = ""
        self.deny_load_mod = False
        self.deny_set_bind_host = False
        self.ident = name
        self.join_tries = 10
        self.max_joins = 0
        self.max_networks = 1
        self.max_query_buffers = 50
        self.multi_clients = True
        self.nick = name
        self.password_hash = ""
        self.password_salt = ""
        self.prepend_timestamp = True
        self.query_buffer_size = 50
        self.quit_msg = ""
        self.real_name = ""
        self.skin = ""
        self.status_prefix = "*"
        self.timestamp_format = "[%H:%M:%S]"
        self.timezone = ""
        self.networks: List[Network] = []
        self.clients: List[Client] = []
        self.modules = ModuleManager("user", service.catalog)

    @property
    def is_admin(self) -> bool:
        return self.admin

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return bool(name) and all(char.isalnum() or char in "@._-" for char in name)

    @staticmethod
    def salted_hash(password: str, salt: str) -> str:
        return hashlib.sha256((password + salt).encode("utf-8")).hexdigest()

    def set_password(self, password: str) -> None:
        self.password_salt = secrets.token_hex(10)
        self.password_hash = self.salted_hash(password, self.password_salt)

    def check_password(self, password: str) -> bool:
        return secrets.compare_digest(
            self.password_hash, self.salted_hash(password, self.password_salt)
        )

    def set_chan_buffer_size(self, size: int, force: bool = False) -> bool:
        if not force and size > self.service.max_buffer_size:
            return False
        self.chan_buffer_size = size
        return True

    def set_query_buffer_size(self, size: int, force: bool = False) -> bool:
        if not force and size > self.service.max_buffer_size:
            return False
        self.query_buffer_size = size
        return True

    def add_allowed_host(self, host: str) -> bool:
        if not host or host in self.allowed_hosts:
            return False
        self.allowed_hosts.append(host)
        return True

    def add_ctcp_reply(self, request: str, reply: str) -> bool:
        if not request or not reply:
            return False
        self.ctcp_replies[request.upper()] = reply
        return True

    def del_ctcp_reply(self, request: str) -> bool:
        return self.ctcp_replies.pop(request.upper(), None) is not None

    def find_network(self, name: str) -> Optional[Network]:
        for network in self.networks:
            if network.name.lower() == name.lower():
                return network
        return None

    find_child = find_network

    def has_space_for_new_network(self) -> bool:
        return len(self.networks) < self.max_networks

    def add_network(self, name: str) -> Network:
        """Add a network.

        Args:
            name: Alphanumeric network name

        Returns:
            The new network

        Raises:
            ValueError: If the name is invalid or taken
        """
        if not Network.is_valid_name(name):
            raise ValueError("Invalid network name. It should be alphanumeric.")
        if self.find_network(name) is not None:
            raise ValueError(f"Network [{name}] already exists")
        network = Network(self, name)
        self.networks.append(network)
        return network

    def delete_network(self, name: str) -> bool:
        network = self.find_network(name)
        if network is None:
            return False
        network.disconnect()
        self.networks.remove(network)
        return True

    @property
    def bytes_read(self) -> int:
        return sum(network.bytes_read for network in self.networks)

    @property
    def bytes_written(self) -> int:
        return sum(network.bytes_written for network in self.networks)

    def clone(self, source: "User") -> None:
        """Copy settings and networks of another user, keeping the name."""
        data = source.to_dict()
        _load_fields(self, data, self.FIELDS)
        self.allowed_hosts = list(source.allowed_hosts)
        self.ctcp_replies = dict(source.ctcp_replies)
        for network in list(self.networks):
            if source.find_network(network.name) is None:
                self.delete_network(network.name)
        for network in source.networks:
            target = self.find_network(network.name) or self.add_network(network.name)
            target.clone(network)

    def load(self, data: Dict[str, Any]) -> None:
        _load_fields(self, data, self.FIELDS)
        self.allowed_hosts = list(data.get("allowed_hosts") or [])
        self.ctcp_replies = dict(data.get("ctcp_replies") or {})
        if "password" in data:
            self.set_password(str(data["password"]))
        for name in data.get("modules") or []:
            self.modules.loaded.setdefault(name, "")
        _sync_children(
            self,
            data.get("networks") or {},
            self.networks,
            self.add_network,
            self.delete_network,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _dump_fields(self, self.FIELDS)
        data["modules"] = sorted(self.modules.loaded)
        data["networks"] = {network.name: network.to_dict() for network in self.networks}
        return data


class Service:
    """The bouncer service singleton."""

    FIELDS = (
        "anon_ip_limit",
        "connect_delay",
        "hide_version",
        "max_buffer_size",
        "motd",
        "protect_web_sessions",
        "server_throttle",
        "skin",
        "ssl_cert_file",
        "ssl_ciphers",
        "ssl_protocols",
        "status_prefix",
        "trusted_proxies",
    )

    def __init__(self, config_file: Optional[str] = None):
        """Initialize an empty service.

        Args:
            config_file: Path of the YAML configuration file
        """
        self.config_file = config_file
        self.anon_ip_limit = 10
        self.connect_delay = 5
        self.hide_version = False
        self.max_buffer_size = 500
        self.motd: List[str] = []
        self.protect_web_sessions = True
        self.server_throttle = 30
        self.skin = ""
        self.ssl_cert_file = ""
        self.ssl_ciphers = ""
        self.ssl_protocols = ""
        self.status_prefix = ""
        self.trusted_proxies: List[str] = []
        self.catalog: Dict[str, ModuleInfo] = {info.name: info for info in DEFAULT_MODULES}
        self.modules = ModuleManager("global", self.catalog)
        self.listeners: List[Listener] = []
        self.broadcasts: List[str] = []
        self._users: Dict[str, User] = {}

    @classmethod
    def from_config(cls, config_file: str) -> "Service":
        """Create a service from a YAML configuration file.

        A missing file yields an empty service.

        Args:
            config_file: Path of the configuration file

        Returns:
            Service instance
        """
        service = cls(config_file)
        if not os.path.exists(config_file):
            logger.warning(f"Configuration not found at {config_file}, starting empty")
            return service
        if not service.rehash():
            raise ValueError(f"Failed to read '{config_file}'")
        return service

    @property
    def users(self) -> List[User]:
        return [self._users[name] for name in sorted(self._users)]

    def find_user(self, name: str) -> Optional[User]:
        return self._users.get(name)

    find_child = find_user

    def new_user(self, name: str) -> User:
        return User(self, name)

    def add_user(self, user: User) -> None:
        """Add a user to the directory.

        Args:
            user: User created with ``new_user``

        Raises:
            ValueError: If the name is invalid or already taken
        """
        if not User.is_valid_name(user.name):
            raise ValueError("Invalid username")
        if user.name in self._users:
            raise ValueError("User already exists")
        self._users[user.name] = user
        logger.info(f"Added user '{user.name}'")

    def delete_user(self, name: str) -> bool:
        user = self._users.pop(name, None)
        if user is None:
            return False
        for network in user.networks:
            network.disconnect()
        logger.info(f"Deleted user '{name}'")
        return True

    def add_listener(self, listener: Listener) -> bool:
        if self.find_listener(listener.port, listener.bind_host, listener.addr_type):
            return False
        self.listeners.append(listener)
        return True

    def find_listener(self, port: int, bind_host: str, addr_type: str) -> Optional[Listener]:
        for listener in self.listeners:
            if (
                listener.port == port
                and listener.bind_host == bind_host
                and listener.addr_type == addr_type
            ):
                return listener
        return None

    def del_listener(self, listener: Listener) -> None:
        self.listeners.remove(listener)

    def broadcast(self, message: str) -> None:
        self.broadcasts.append(message)
        logger.info(f"Broadcast: {message}")

    def update_module(self, name: str) -> bool:
        """Reload every loaded instance of a module.

        Returns:
            False if no instance is loaded
        """
        managers: List[ModuleManager] = [self.modules]
        for user in self._users.values():
            managers.append(user.modules)
            managers.extend(network.modules for network in user.networks)

        updated = False
        for manager in managers:
            if manager.find_module(name):
                manager.reload_module(name, manager.loaded[name])
                updated = True
        return updated

    def load(self, data: Dict[str, Any]) -> None:
        _load_fields(self, data, self.FIELDS)
        self.motd = list(data.get("motd") or [])
        self.trusted_proxies = list(data.get("trusted_proxies") or [])
        self.listeners = [Listener(**item) for item in data.get("listeners") or []]
        for name in data.get("modules") or []:
            self.modules.loaded.setdefault(name, "")
        _sync_children(
            self,
            data.get("users") or {},
            self.users,
            self._add_named_user,
            self.delete_user,
        )

    def _add_named_user(self, name: str) -> User:
        user = self.new_user(name)
        self.add_user(user)
        return user

    def to_dict(self) -> Dict[str, Any]:
        data = _dump_fields(self, self.FIELDS)
        data["listeners"] = [asdict(listener) for listener in self.listeners]
        data["modules"] = sorted(self.modules.loaded)
        data["users"] = {user.name: user.to_dict() for user in self.users}
        return data

    def rehash(self) -> bool:
        """Reload the configuration file.

        Returns:
            True if the file was read and applied
        """
        if not self.config_file:
            logger.error("No configuration file to read")
            return False
        try:
            with open(self.config_file, "r") as f:
                config = yaml.safe_load(f) or {}
            self.load(config)
            logger.info(f"Read configuration from {self.config_file}")
            return True
        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            logger.error(f"Failed to read configuration: {e}", exc_info=True)
            return False

    def write_config(self) -> bool:
        """Write the configuration file.

        Returns:
            True if the file was written
        """
        if not self.config_file:
            logger.error("No configuration file to write")
            return False
        try:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
            logger.info(f"Wrote configuration to {self.config_file}")
            return True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to write configuration: {e}")
            return False
