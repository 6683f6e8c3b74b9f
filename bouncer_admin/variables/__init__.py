"""Variable tables of the admin console, one per scope kind."""

from ..scopes import ScopeKind
from .base import NO_RESET, Variable, VarType, create_attribute_variable, find_variables
from .channel_vars import CHANNEL_VARIABLES
from .global_vars import GLOBAL_VARIABLES
from .network_vars import NETWORK_VARIABLES
from .user_vars import USER_VARIABLES

VARIABLES = {
    ScopeKind.GLOBAL: GLOBAL_VARIABLES,
    ScopeKind.USER: USER_VARIABLES,
    ScopeKind.NETWORK: NETWORK_VARIABLES,
    ScopeKind.CHANNEL: CHANNEL_VARIABLES,
}

__all__ = [
    "NO_RESET",
    "Variable",
    "VarType",
    "create_attribute_variable",
    "find_variables",
    "CHANNEL_VARIABLES",
    "GLOBAL_VARIABLES",
    "NETWORK_VARIABLES",
    "USER_VARIABLES",
    "VARIABLES",
]
