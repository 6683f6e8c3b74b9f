"""Variables of the channel scope.

Buffer and AutoClearChanBuffer inherit the owning user's setting until they
are set on the channel; the inherited value is shown with a ``(default)``
suffix.
"""

from ..errors import ValidationError
from .base import Variable, VarType, create_attribute_variable, format_bool, to_bool, to_uint

DEFAULT_SUFFIX = " (default)"


def _get_auto_clear(context, channel) -> str:
    value = format_bool(channel.auto_clear_chan_buffer)
    if not channel.has_auto_clear_chan_buffer_set:
        value += DEFAULT_SUFFIX
    return value


def _set_auto_clear(context, channel, value: str) -> None:
    channel.auto_clear_chan_buffer = to_bool(value)


def _get_buffer(context, channel) -> str:
    value = str(channel.buffer_count)
    if not channel.has_buffer_count_set:
        value += DEFAULT_SUFFIX
    return value


def _set_buffer(context, channel, value: str) -> None:
    if not channel.set_buffer_count(to_uint(value), channel.network.user.is_admin):
        raise ValidationError(
            f"Setting failed, the limit is {context.service.max_buffer_size}"
        )


def _set_detached(context, channel, value: str) -> None:
    if to_bool(value):
        channel.detach()
    else:
        channel.attach()


def _set_disabled(context, channel, value: str) -> None:
    if to_bool(value):
        channel.disable()
    else:
        channel.enable()


CHANNEL_VARIABLES = (
    Variable(
        name="AutoClearChanBuffer",
        type=VarType.BOOLEAN,
        description="Whether the channel buffer is automatically cleared after playback.",
        get_func=_get_auto_clear,
        set_func=_set_auto_clear,
        reset_func=lambda context, channel: channel.reset_auto_clear_chan_buffer(),
    ),
    Variable(
        name="Buffer",
        type=VarType.INTEGER,
        description="The maximum amount of lines stored for the channel specific playback buffer.",
        get_func=_get_buffer,
        set_func=_set_buffer,
        reset_func=lambda context, channel: channel.reset_buffer_count(),
    ),
    Variable(
        name="Detached",
        type=VarType.BOOLEAN,
        description="Whether the channel is detached.",
        get_func=lambda context, channel: format_bool(channel.detached),
        set_func=_set_detached,
        reset_func=lambda context, channel: channel.attach(),
    ),
    Variable(
        name="Disabled",
        type=VarType.BOOLEAN,
        description="Whether the channel is disabled.",
        get_func=lambda context, channel: format_bool(channel.disabled),
        set_func=_set_disabled,
        reset_func=lambda context, channel: channel.enable(),
    ),
    create_attribute_variable(
        "InConfig", VarType.BOOLEAN, "in_config",
        "Whether the channel is stored in the config file.",
    ),
    create_attribute_variable(
        "Key", VarType.STRING, "key",
        "An optional channel key.", "",
    ),
    create_attribute_variable(
        "Modes", VarType.STRING, "default_modes",
        "An optional set of default channel modes set when joining an empty channel.", "",
    ),
)
