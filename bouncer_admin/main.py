#!/usr/bin/env python3
"""Main entry point for the bouncer admin console.

This module loads the bouncer configuration and runs the console against
raw client lines read from standard input, one per line. Replies are
written to standard output as ``:<query> <line>``.

Initialization Order:
    1. Service - Loads users, networks and channels from the YAML config
    2. Module Settings - Loads the console's own settings (the infix)
    3. Admin Console - Resolves, authorizes and dispatches lines

Environment Variables:
    BOUNCER_CONFIG: Bouncer configuration file (default: 'bouncer.yml')
    BOUNCER_STATE: Console state file (default: 'admin_state.json')
    BOUNCER_USER: User the console acts as (required)
    BOUNCER_NETWORK: Current network of the session (optional)
    LOG_LEVEL: Logging level (default: 'INFO')

Example:
    Run the console locally for development:

    $ export BOUNCER_USER=alice
    $ export LOG_LEVEL=DEBUG
    $ echo "PRIVMSG *user :Get Nick" | python -m bouncer_admin.main
"""

import logging
import os
import sys
from typing import TextIO

from .admin_console import AdminConsole
from .commands import token
from .errors import FatalCommand, RestartRequested
from .host import Service
from .scopes import Session
from .settings import ModuleSettings

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


class StreamSink:
    """Writes console replies to a text stream."""

    def __init__(self, session: Session, stream: TextIO = sys.stdout):
        """Initialize sink.

        Args:
            session: Session whose status prefix names the queries
            stream: Output stream
        """
        self.session = session
        self.stream = stream

    def put_module(self, target: str, line: str) -> None:
        self.stream.write(f":{self.session.user.status_prefix}{target} {line}\n")
        self.stream.flush()


def build_session(service: Service) -> Session:
    """Build the session of the acting user from the environment.

    Args:
        service: Loaded service

    Returns:
        Session of BOUNCER_USER on BOUNCER_NETWORK

    Raises:
        ValueError: If the user or network does not exist
    """
    username = os.getenv("BOUNCER_USER", "")
    user = service.find_user(username)
    if user is None:
        raise ValueError(f"Unknown user '{username}' (set BOUNCER_USER)")

    network = None
    network_name = os.getenv("BOUNCER_NETWORK")
    if network_name:
        network = user.find_network(network_name)
        if network is None:
            raise ValueError(f"User '{username}' has no network '{network_name}'")

    return Session(user=user, network=network)


def run(console: AdminConsole, session: Session, lines) -> None:
    """Feed raw lines to the console.

    Lines sent to the console's own query address the global scope. Other
    lines not consumed by the console are logged and dropped.

    Args:
        console: Admin console
        session: Session of the acting user
        lines: Iterable of raw client lines

    Raises:
        FatalCommand: If a command stops the service
    """
    module_query = session.user.status_prefix + console.module_name
    for raw in lines:
        raw = raw.rstrip("\r\n")
        if not raw or console.on_user_raw(raw, session):
            continue

        if token(raw, 0).upper() == "PRIVMSG" and token(raw, 1) == module_query:
            text = token(raw, 2, rest=True)
            console.on_module_command(text[1:] if text.startswith(":") else text, session)
        else:
            logger.debug(f"Ignored line: {raw}")


def main():
    """Initialize the console and process standard input.

    Raises:
        SystemExit: With code 0 after Restart or Shutdown, 1 on fatal errors
    """
    config_file = os.getenv("BOUNCER_CONFIG", "bouncer.yml")
    logger.info(f"Starting bouncer admin console with {config_file}")

    try:
        service = Service.from_config(config_file)
        settings = ModuleSettings(state_file=os.getenv("BOUNCER_STATE", "admin_state.json"))
        session = build_session(service)
        console = AdminConsole(service, settings, StreamSink(session))

        logger.info(f"Console ready for {session.user.name}")
        run(console, session, sys.stdin)

    except FatalCommand as e:
        action = "Restart" if isinstance(e, RestartRequested) else "Shutdown"
        logger.warning(f"{action} requested: {e.message}")
        sys.exit(0)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
