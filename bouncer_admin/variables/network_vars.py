"""Variables of the network scope."""

from ..permissions import Permission
from .base import Variable, VarType, create_attribute_variable


def _get_fingerprints(context, network) -> str:
    return "\n".join(network.trusted_fingerprints)


def _add_fingerprint(context, network, value: str) -> None:
    for fingerprint in value.split():
        if fingerprint not in network.trusted_fingerprints:
            network.trusted_fingerprints.append(fingerprint)


def _clear_fingerprints(context, network) -> None:
    network.trusted_fingerprints.clear()


NETWORK_VARIABLES = (
    create_attribute_variable(
        "AltNick", VarType.STRING, "alt_nick",
        "An optional network specific alternate nick.", "",
    ),
    create_attribute_variable(
        "BindHost", VarType.STRING, "bind_host",
        "An optional network specific bind host.", "",
        flags=Permission.REQUIRES_BIND_HOST_POLICY,
    ),
    create_attribute_variable(
        "Encoding", VarType.STRING, "encoding",
        "An optional network specific client encoding.", "",
    ),
    create_attribute_variable(
        "FloodBurst", VarType.INTEGER, "flood_burst",
        "The maximum amount of lines sent to the server at once.", 4,
    ),
    create_attribute_variable(
        "FloodRate", VarType.DOUBLE, "flood_rate",
        "The number of lines per second sent after reaching the FloodBurst limit.", 1.0,
    ),
    create_attribute_variable(
        "Ident", VarType.STRING, "ident",
        "An optional network specific ident.", "",
    ),
    create_attribute_variable(
        "JoinDelay", VarType.INTEGER, "join_delay",
        "The delay in seconds, until channels are joined after getting connected.", 0,
    ),
    create_attribute_variable(
        "Nick", VarType.STRING, "nick",
        "An optional network specific primary nick.", "",
    ),
    create_attribute_variable(
        "QuitMsg", VarType.STRING, "quit_msg",
        "An optional network specific quit message.", "",
    ),
    create_attribute_variable(
        "RealName", VarType.STRING, "real_name",
        "An optional network specific real name.", "",
    ),
    Variable(
        name="TrustedServerFingerprint",
        type=VarType.LIST,
        description="The list of trusted SSL server fingerprints, separated by spaces.",
        get_func=_get_fingerprints,
        set_func=_add_fingerprint,
        reset_func=_clear_fingerprints,
    ),
)
