"""Exceptions raised by the admin console.

Every ``ConsoleError`` is recovered by the dispatcher and rendered as a single
reply line. ``FatalCommand`` subclasses are the only exceptions allowed to
leave the console; the process entry point handles them.
"""


class ConsoleError(Exception):
    """Base exception for recoverable console errors."""

    pass


class AddressError(ConsoleError):
    """A target address could not be resolved."""

    pass


class UnknownTarget(AddressError):
    """No user, network or channel matches the address."""

    def __init__(self, message: str = "unknown target"):
        super().__init__(message)


class AmbiguousTarget(AddressError):
    """The address matches nothing unambiguously."""

    def __init__(self, message: str = "unknown (or ambiguous) network or channel"):
        super().__init__(message)


class UnknownNetwork(AddressError):
    """The network segment of an address does not exist."""

    def __init__(self, message: str = "unknown network"):
        super().__init__(message)


class UnknownChannel(AddressError):
    """The channel segment of an address does not exist."""

    def __init__(self, message: str = "unknown channel"):
        super().__init__(message)


class AccessDenied(ConsoleError):
    """The principal is not allowed to perform the operation."""

    def __init__(self, message: str = "access denied"):
        super().__init__(message)


class UnknownVariable(ConsoleError):
    def __init__(self, message: str = "unknown variable"):
        super().__init__(message)


class UnknownCommand(ConsoleError):
    def __init__(self, message: str = "unknown command"):
        super().__init__(message)


class UsageError(ConsoleError):
    """A required argument is missing.

    Attributes:
        syntax: Command syntax shown to the user
    """

    def __init__(self, syntax: str):
        super().__init__(syntax)
        self.syntax = syntax


class ValidationError(ConsoleError):
    """A setter rejected the value."""

    pass


class ResetUnsupported(ConsoleError):
    def __init__(self, message: str = "reset not supported"):
        super().__init__(message)


class FatalCommand(Exception):
    """Raised by commands that terminate the process.

    Attributes:
        message: Message broadcast to all users before terminating
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RestartRequested(FatalCommand):
    pass


class ShutdownRequested(FatalCommand):
    pass
