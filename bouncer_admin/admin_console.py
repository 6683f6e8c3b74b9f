"""Handles admin console queries.

This module provides the dispatcher of the console. A line sent to a query
such as ``*alice/freenode`` is resolved to a scope, checked against the
caller's rights and dispatched to the reserved verbs (Help, List, Get, Set,
Reset) or to a free-form command of that scope.
"""

import logging
from typing import Dict, List, Tuple

from .address import AddressResolver
from .commands import CommandContext, CommandRegistry, build_registries, token
from .errors import (
    AccessDenied,
    ConsoleError,
    FatalCommand,
    ResetUnsupported,
    UnknownCommand,
    UnknownVariable,
    UsageError,
)
from .formatters import ReplyChannel, Table, matches_filter, wildcmp
from .interfaces import IReplySink, IService
from .permissions import authorize, authorize_global_verb
from .scopes import Scope, ScopeKind, Session
from .settings import ModuleSettings
from .variables import VARIABLES, Variable, find_variables

logger = logging.getLogger(__name__)

ROUTED_VERBS = ("PRIVMSG", "ZNC")

RESERVED_VERBS: Tuple[Tuple[str, str], ...] = (
    ("Get <variable>", "Gets the value of a variable."),
    ("Help [filter]", "Generates this output."),
    ("List [filter]", "Lists available variables filtered by name or type."),
    ("Reset <variable>", "Resets the value of a variable."),
    ("Set <variable> <value>", "Sets the value of a variable."),
)


class AdminConsole:
    """Dispatches console lines to the variables and commands of a scope.

    Each line is handled on its own: the address is resolved, scope access
    is checked once, then the verb runs. Console errors become a single
    ``Error:`` or ``Usage:`` line; only RestartRequested and
    ShutdownRequested leave the console.

    Example:
        console = AdminConsole(service, ModuleSettings("state.json"), sink)
        session = Session(user=alice, network=freenode)
        console.on_user_raw("PRIVMSG *user :Get Nick", session)
    """

    def __init__(
        self,
        service: IService,
        settings: ModuleSettings,
        sink: IReplySink,
        module_name: str = "admin",
    ):
        """Initialize console.

        Args:
            service: Global service with the user directory
            settings: Key/value store of the console's own settings
            sink: Line transport back to the calling client
            module_name: Name of the console's own query
        """
        self.service = service
        self.settings = settings
        self.sink = sink
        self.module_name = module_name
        self.resolver = AddressResolver(service)
        self.variables: Dict[ScopeKind, Tuple[Variable, ...]] = VARIABLES
        self.registries: Dict[ScopeKind, CommandRegistry] = build_registries()

    def get_prefix(self, session: Session) -> str:
        """Get the query prefix addressing the console.

        Args:
            session: Caller's session

        Returns:
            Status prefix followed by the caller's infix
        """
        user = session.user
        return user.status_prefix + self.settings.get_infix(user)

    def on_user_raw(self, raw: str, session: Session) -> bool:
        """Handle a raw line sent by a client.

        Args:
            raw: IRC line, optionally with tags and source
            session: Caller's session

        Returns:
            True if the line was consumed by the console
        """
        line = raw
        if line.startswith("@"):
            line = token(line, 1, rest=True)
        if line.startswith(":"):
            line = token(line, 1, rest=True)

        if token(line, 0).upper() not in ROUTED_VERBS:
            return False

        query = token(line, 1)
        prefix = self.get_prefix(session)
        if not query.startswith(prefix):
            return False

        address = query[len(prefix):]
        text = token(line, 2, rest=True)
        if text.startswith(":"):
            text = text[1:]

        reply = ReplyChannel(self.sink, self.settings.get_infix(session.user) + address)
        context = CommandContext(session, self.service, self.settings, reply)

        try:
            scope = self.resolver.resolve(address, session)
        except ConsoleError as e:
            logger.debug(f"Failed to resolve '{address}': {e}")
            reply.put_error(str(e))
            return True

        if scope is None:
            return False

        self.dispatch(scope, text, context)
        return True

    def on_module_command(self, line: str, session: Session) -> None:
        """Handle a line sent to the console's own query.

        Lines sent there address the global scope.

        Args:
            line: Command line
            session: Caller's session

        Returns:
            None
        """
        reply = ReplyChannel(self.sink, self.module_name)
        context = CommandContext(session, self.service, self.settings, reply)
        self.dispatch(Scope(ScopeKind.GLOBAL, self.service), line, context)

    def dispatch(self, scope: Scope, line: str, context: CommandContext) -> None:
        """Run one command line against a resolved scope.

        Args:
            scope: Resolved target scope
            line: Command line, verb first
            context: Execution context of this line

        Returns:
            None

        Raises:
            FatalCommand: If the command stops the service
        """
        verb = token(line, 0)
        principal = context.principal
        logger.debug(f"{principal.name} -> {scope.kind.value}: {verb}")

        try:
            self._authorize_scope(scope, verb, context)

            handlers = {
                "help": self._help,
                "list": self._list,
                "get": self._get,
                "set": self._set,
                "reset": self._reset,
            }
            handler = handlers.get(verb.lower())
            if handler is not None:
                handler(scope, line, context)
            else:
                self._execute(scope, line, context)
        except UsageError as e:
            context.reply.put_usage(e.syntax)
        except ConsoleError as e:
            context.reply.put_error(str(e))
        except FatalCommand:
            raise
        except Exception as e:
            logger.error(f"Command execution failed: {e}", exc_info=True)
            context.reply.put_error(f"command failed: {e}")

    def _authorize_scope(self, scope: Scope, verb: str, context: CommandContext) -> None:
        principal = context.principal
        if scope.kind == ScopeKind.GLOBAL:
            allowed = authorize_global_verb(principal, verb)
        else:
            allowed = scope.owner is principal or principal.is_admin

        if not allowed:
            logger.info(f"Access denied: {principal.name} -> {scope.kind.value} {verb}")
            raise AccessDenied()

    def _help(self, scope: Scope, line: str, context: CommandContext) -> None:
        filter_text = token(line, 1)

        entries: Dict[str, str] = {
            syntax: description
            for syntax, description in RESERVED_VERBS
            if wildcmp(token(syntax, 0), filter_text)
        }
        for command in self.registries[scope.kind].filter(filter_text):
            entries[command.syntax] = command.description

        table = Table(["Command", "Description"])
        for syntax in sorted(entries):
            table.add_row(Command=syntax, Description=entries[syntax])
        context.reply.put_table_or(table, f"No matches for '{filter_text}'")

        if scope.kind == ScopeKind.GLOBAL and not filter_text:
            for guide_line in self._usage_guide(context.session):
                context.reply.put_line(guide_line)

    def _usage_guide(self, session: Session) -> List[str]:
        prefix = self.get_prefix(session)
        return [
            "To access settings of the current user or network, open a query",
            f"with {prefix}user or {prefix}network, respectively.",
            "-----",
            f"- user settings: /msg {prefix}user help",
            f"- network settings: /msg {prefix}network help",
            "-----",
            "To access settings of a different user (admins only) or a specific",
            f"network, open a query with {prefix}target, where target is the name of",
            "the user or network. The same applies to channel specific settings.",
            "-----",
            f"- user settings: /msg {prefix}somebody help",
            f"- network settings: /msg {prefix}freenode help",
            f"- channel settings: /msg {prefix}#znc help",
            "-----",
            "It is also possible to access the network settings of a different",
            "user (admins only), or the channel settings of a different network.",
            "Combine a user, network and channel name separated by a forward",
            "slash ('/') character.",
            "-----",
            "Advanced examples:",
            f"- network settings of another user: /msg {prefix}somebody/freenode help",
            f"- channel settings of another network: /msg {prefix}freenode/#znc help",
            "- channel settings of another network of another user: "
            f"/msg {prefix}somebody/freenode/#znc help",
        ]

    def _list(self, scope: Scope, line: str, context: CommandContext) -> None:
        filter_text = token(line, 1)

        table = Table(["Variable", "Description"])
        for variable in self.variables[scope.kind]:
            if variable.type.value.lower() == filter_text.lower() or matches_filter(
                variable.name, filter_text
            ):
                table.add_row(Variable=variable.label, Description=variable.description)

        if table.empty:
            raise UnknownVariable()
        context.reply.put_table(table)

    def _get(self, scope: Scope, line: str, context: CommandContext) -> None:
        pattern = token(line, 1)
        if not pattern:
            raise UsageError("Get <variable>")

        matches = self._match_variables(scope, pattern)
        for variable in matches:
            self._put_value(variable, scope, context)

    def _set(self, scope: Scope, line: str, context: CommandContext) -> None:
        pattern = token(line, 1)
        value = token(line, 2, rest=True)
        if not pattern or not value:
            raise UsageError("Set <variable> <value>")

        for variable in self._match_variables(scope, pattern):
            try:
                self._check_variable(variable, context)
                variable.set(context, scope.handle, value)
            except ConsoleError as e:
                context.reply.put_error(str(e))
                continue
            logger.info(f"{context.principal.name} set {scope.kind.value} {variable.name}")
            self._put_value(variable, scope, context)

    def _reset(self, scope: Scope, line: str, context: CommandContext) -> None:
        pattern = token(line, 1)
        if not pattern:
            raise UsageError("Reset <variable>")

        for variable in self._match_variables(scope, pattern):
            try:
                if not variable.can_reset:
                    raise ResetUnsupported()
                self._check_variable(variable, context)
                variable.reset(context, scope.handle)
            except ConsoleError as e:
                context.reply.put_error(str(e))
                continue
            logger.info(f"{context.principal.name} reset {scope.kind.value} {variable.name}")
            self._put_value(variable, scope, context)

    def _execute(self, scope: Scope, line: str, context: CommandContext) -> None:
        command = self.registries[scope.kind].get(token(line, 0))
        if command is None:
            raise UnknownCommand()
        command.execute(scope.handle, token(line, 1, rest=True), context)

    def _match_variables(self, scope: Scope, pattern: str) -> List[Variable]:
        matches = find_variables(self.variables[scope.kind], pattern)
        if not matches:
            raise UnknownVariable()
        return matches

    @staticmethod
    def _check_variable(variable: Variable, context: CommandContext) -> None:
        if not authorize(context.principal, variable):
            logger.info(f"Access denied: {context.principal.name} -> {variable.name}")
            raise AccessDenied()

    @staticmethod
    def _put_value(variable: Variable, scope: Scope, context: CommandContext) -> None:
        values = [value for value in variable.get(context, scope.handle).split("\n") if value]
        if not values:
            context.reply.put_line(f"{variable.name} = ")
        for value in values:
            context.reply.put_line(f"{variable.name} = {value}")
