"""Variables of the user scope."""

from ..errors import ValidationError
from ..permissions import Permission
from .base import Variable, VarType, create_attribute_variable, to_uint


def _get_admin_infix(context, user) -> str:
    return context.settings.get_infix(user)


def _set_admin_infix(context, user, value: str) -> None:
    context.settings.set_infix(user, value)


def _reset_admin_infix(context, user) -> None:
    context.settings.reset_infix(user)


def _get_allowed_hosts(context, user) -> str:
    return "\n".join(user.allowed_hosts)


def _set_allowed_hosts(context, user, value: str) -> None:
    for host in value.split():
        user.add_allowed_host(host)


def _reset_allowed_hosts(context, user) -> None:
    user.allowed_hosts.clear()


def _create_buffer_size_variable(name: str, attribute: str, description: str) -> Variable:
    """Create a buffer size variable bounded by the global maximum.

    Admin users are exempt from the bound.

    Args:
        name: Variable name
        attribute: User attribute holding the size
        description: One line description

    Returns:
        Variable instance
    """

    def get_size(context, user) -> str:
        return str(getattr(user, attribute))

    def set_size(context, user, value: str) -> None:
        size = to_uint(value)
        setter = getattr(user, f"set_{attribute}")
        if not setter(size, user.is_admin):
            raise ValidationError(
                f"Setting failed, limit is {context.service.max_buffer_size}"
            )

    def reset_size(context, user) -> None:
        setattr(user, attribute, 50)

    return Variable(
        name=name,
        type=VarType.INTEGER,
        description=description,
        get_func=get_size,
        set_func=set_size,
        reset_func=reset_size,
    )


def _get_ctcp_replies(context, user) -> str:
    return "\n".join(f"{request} {reply}" for request, reply in user.ctcp_replies.items())


def _set_ctcp_reply(context, user, value: str) -> None:
    parts = value.split(None, 1)
    request = parts[0] if parts else ""
    reply = parts[1].strip() if len(parts) > 1 else ""
    if not reply:
        if not user.del_ctcp_reply(request):
            raise ValidationError("unable to remove")
    elif not user.add_ctcp_reply(request, reply):
        raise ValidationError("unable to add")


def _reset_ctcp_replies(context, user) -> None:
    user.ctcp_replies.clear()


def _get_password(context, user) -> str:
    return "." * len(user.password_hash)


def _set_password(context, user, value: str) -> None:
    user.set_password(value)


def _set_status_prefix(context, user, value: str) -> None:
    if not value or " " in value:
        raise ValidationError("invalid status prefix")
    user.status_prefix = value


USER_VARIABLES = (
    create_attribute_variable(
        "Admin", VarType.BOOLEAN, "admin",
        "Whether the user has admin rights.", False,
        flags=Permission.REQUIRES_ADMIN,
    ),
    Variable(
        name="AdminInfix",
        type=VarType.STRING,
        description="An infix (after the status prefix) to direct admin queries.",
        get_func=_get_admin_infix,
        set_func=_set_admin_infix,
        reset_func=_reset_admin_infix,
    ),
    Variable(
        name="Allow",
        type=VarType.LIST,
        description="The list of allowed IPs for the user. Wildcards (*) are supported.",
        get_func=_get_allowed_hosts,
        set_func=_set_allowed_hosts,
        reset_func=_reset_allowed_hosts,
    ),
    create_attribute_variable(
        "AltNick", VarType.STRING, "alt_nick",
        "The default alternate nick.", "",
    ),
    create_attribute_variable(
        "AppendTimestamp", VarType.BOOLEAN, "append_timestamp",
        "Whether timestamps are appended to buffer playback messages.", False,
    ),
    create_attribute_variable(
        "AutoClearChanBuffer", VarType.BOOLEAN, "auto_clear_chan_buffer",
        "Whether channel buffers are automatically cleared after playback.", True,
    ),
    create_attribute_variable(
        "AutoClearQueryBuffer", VarType.BOOLEAN, "auto_clear_query_buffer",
        "Whether query buffers are automatically cleared after playback.", True,
    ),
    create_attribute_variable(
        "BindHost", VarType.STRING, "bind_host",
        "The default bind host.", "",
        flags=Permission.REQUIRES_BIND_HOST_POLICY,
    ),
    _create_buffer_size_variable(
        "ChanBufferSize", "chan_buffer_size",
        "The maximum amount of lines stored for each channel playback buffer.",
    ),
    create_attribute_variable(
        "ChanModes", VarType.STRING, "chan_modes",
        "The default modes the bouncer sets when joining an empty channel.", "",
    ),
    create_attribute_variable(
        "ClientEncoding", VarType.STRING, "client_encoding",
        "The default client encoding.", "",
    ),
    Variable(
        name="CTCPReply",
        type=VarType.LIST,
        description="A list of CTCP request-reply-pairs. Syntax: <request> <reply>.",
        get_func=_get_ctcp_replies,
        set_func=_set_ctcp_reply,
        reset_func=_reset_ctcp_replies,
    ),
    create_attribute_variable(
        "DCCBindHost", VarType.STRING, "dcc_bind_host",
        "The bind host used for DCC transfers.", "",
        flags=Permission.REQUIRES_BIND_HOST_POLICY,
    ),
    create_attribute_variable(
        "DenyLoadMod", VarType.BOOLEAN, "deny_load_mod",
        "Whether the user is denied access to load modules.", False,
        flags=Permission.REQUIRES_ADMIN,
    ),
    create_attribute_variable(
        "DenySetBindHost", VarType.BOOLEAN, "deny_set_bind_host",
        "Whether the user is denied access to set a bind host.", False,
        flags=Permission.REQUIRES_ADMIN,
    ),
    create_attribute_variable(
        "Ident", VarType.STRING, "ident",
        "The default ident.",
    ),
    create_attribute_variable(
        "JoinTries", VarType.INTEGER, "join_tries",
        "The amount of times channels are attempted to join in case of a failure.", 10,
    ),
    create_attribute_variable(
        "MaxJoins", VarType.INTEGER, "max_joins",
        "The maximum number of channels joined at once, 0 for no limit.", 0,
    ),
    create_attribute_variable(
        "MaxNetworks", VarType.INTEGER, "max_networks",
        "The maximum number of networks the user is allowed to have.", 1,
        flags=Permission.REQUIRES_ADMIN,
    ),
    create_attribute_variable(
        "MaxQueryBuffers", VarType.INTEGER, "max_query_buffers",
        "The maximum number of query buffers that are stored.", 50,
    ),
    create_attribute_variable(
        "MultiClients", VarType.BOOLEAN, "multi_clients",
        "Whether multiple clients are allowed to connect simultaneously.", True,
    ),
    create_attribute_variable(
        "Nick", VarType.STRING, "nick",
        "The default primary nick.", "",
    ),
    Variable(
        name="Password",
        type=VarType.STRING,
        description="The password of the user, stored as a salted hash.",
        get_func=_get_password,
        set_func=_set_password,
    ),
    create_attribute_variable(
        "PrependTimestamp", VarType.BOOLEAN, "prepend_timestamp",
        "Whether timestamps are prepended to buffer playback messages.", True,
    ),
    _create_buffer_size_variable(
        "QueryBufferSize", "query_buffer_size",
        "The maximum amount of lines stored for each query playback buffer.",
    ),
    create_attribute_variable(
        "QuitMsg", VarType.STRING, "quit_msg",
        "The default quit message used when disconnecting or shutting down.", "",
    ),
    create_attribute_variable(
        "RealName", VarType.STRING, "real_name",
        "The default real name.", "",
    ),
    create_attribute_variable(
        "Skin", VarType.STRING, "skin",
        "The selected skin of the web interface.", "",
    ),
    Variable(
        name="StatusPrefix",
        type=VarType.STRING,
        description="The prefix for status and module queries.",
        get_func=lambda context, user: user.status_prefix,
        set_func=_set_status_prefix,
        reset_func=lambda context, user: setattr(user, "status_prefix", "*"),
    ),
    create_attribute_variable(
        "TimestampFormat", VarType.STRING, "timestamp_format",
        "The format of the timestamps used in buffer playback messages.", "[%H:%M:%S]",
    ),
    create_attribute_variable(
        "Timezone", VarType.STRING, "timezone",
        "The timezone used for timestamps in buffer playback messages.", "",
    ),
)
