"""Variables of the global service scope."""

from ..errors import ValidationError
from .base import Variable, VarType, create_attribute_variable, to_uint


def _get_motd(context, service) -> str:
    return "\n".join(service.motd)


def _set_motd(context, service, value: str) -> None:
    service.motd.append(value)


def _reset_motd(context, service) -> None:
    service.motd.clear()


def _get_trusted_proxies(context, service) -> str:
    return "\n".join(service.trusted_proxies)


def _set_trusted_proxies(context, service, value: str) -> None:
    for proxy in value.split():
        if proxy not in service.trusted_proxies:
            service.trusted_proxies.append(proxy)


def _reset_trusted_proxies(context, service) -> None:
    service.trusted_proxies.clear()


def _set_max_buffer_size(context, service, value: str) -> None:
    size = to_uint(value)
    if size == 0:
        raise ValidationError("the maximum buffer size must be positive")
    service.max_buffer_size = size


GLOBAL_VARIABLES = (
    create_attribute_variable(
        "AnonIPLimit", VarType.INTEGER, "anon_ip_limit",
        "The limit of anonymous unidentified connections per IP.", 10,
    ),
    create_attribute_variable(
        "ConnectDelay", VarType.INTEGER, "connect_delay",
        "The number of seconds every IRC connection is delayed.", 5,
    ),
    create_attribute_variable(
        "HideVersion", VarType.BOOLEAN, "hide_version",
        "Whether the version number is hidden from other people.", False,
    ),
    Variable(
        name="MaxBufferSize",
        type=VarType.INTEGER,
        description="The maximum playback buffer size of users and channels.",
        get_func=lambda context, service: str(service.max_buffer_size),
        set_func=_set_max_buffer_size,
        reset_func=lambda context, service: setattr(service, "max_buffer_size", 500),
    ),
    Variable(
        name="Motd",
        type=VarType.LIST,
        description="Message of the day, appends a line; Reset clears it.",
        get_func=_get_motd,
        set_func=_set_motd,
        reset_func=_reset_motd,
    ),
    create_attribute_variable(
        "ProtectWebSessions", VarType.BOOLEAN, "protect_web_sessions",
        "Whether web sessions are bound to the IP they were created from.", True,
    ),
    create_attribute_variable(
        "ServerThrottle", VarType.INTEGER, "server_throttle",
        "The number of seconds between connection attempts to the same host.", 30,
    ),
    create_attribute_variable(
        "Skin", VarType.STRING, "skin",
        "The default skin of the web interface.", "",
    ),
    create_attribute_variable(
        "SSLCertFile", VarType.STRING, "ssl_cert_file",
        "The TLS certificate file.",
    ),
    create_attribute_variable(
        "SSLCiphers", VarType.STRING, "ssl_ciphers",
        "The allowed TLS ciphers.", "",
    ),
    create_attribute_variable(
        "SSLProtocols", VarType.STRING, "ssl_protocols",
        "The allowed TLS protocols.", "",
    ),
    create_attribute_variable(
        "StatusPrefix", VarType.STRING, "status_prefix",
        "The default status prefix of new users.", "",
    ),
    Variable(
        name="TrustedProxy",
        type=VarType.LIST,
        description="Trusted proxies, separated by spaces; Reset clears them.",
        get_func=_get_trusted_proxies,
        set_func=_set_trusted_proxies,
        reset_func=_reset_trusted_proxies,
    ),
)
