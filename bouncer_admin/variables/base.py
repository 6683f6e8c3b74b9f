"""Base classes for console variables.

This module provides the Variable dataclass, value parsing and formatting
for each variable type, and a factory for variables that map straight to
an attribute of the scope object.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..errors import ResetUnsupported, ValidationError
from ..formatters import wildcmp
from ..permissions import Permission

if TYPE_CHECKING:
    from ..commands.context import CommandContext

# marker for attribute variables that cannot be reset
NO_RESET = object()

FALSE_WORDS = ("false", "off", "no", "n")


class VarType(Enum):
    """Value types, by the name shown in List output."""

    STRING = "String"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    DOUBLE = "Double"
    LIST = "List"


@dataclass(frozen=True)
class Variable:
    """A named setting of one scope kind.

    Attributes:
        name: Variable name, unique per scope kind ignoring case
        type: Value type
        description: One line description for List output
        get_func: Returns the current value; list values are newline joined
        set_func: Applies a new value, raising ValidationError on bad input
        reset_func: Restores the default, or None if reset is unsupported
        flags: Permissions required to set or reset the variable
    """

    name: str
    type: VarType
    description: str
    get_func: Callable[["CommandContext", Any], str]
    set_func: Callable[["CommandContext", Any, str], None]
    reset_func: Optional[Callable[["CommandContext", Any], None]] = None
    flags: Permission = Permission.NONE

    @property
    def label(self) -> str:
        return f"{self.name} ({self.type.value})"

    @property
    def can_reset(self) -> bool:
        return self.reset_func is not None

    def get(self, context: "CommandContext", target: Any) -> str:
        return self.get_func(context, target)

    def set(self, context: "CommandContext", target: Any, value: str) -> None:
        self.set_func(context, target, value)

    def reset(self, context: "CommandContext", target: Any) -> None:
        """Restore the default value.

        Args:
            context: Execution context
            target: Scope object

        Raises:
            ResetUnsupported: If the variable has no default to restore
        """
        if self.reset_func is None:
            raise ResetUnsupported()
        self.reset_func(context, target)


def to_bool(value: str) -> bool:
    """Parse a boolean the lenient way IRC users type it.

    Empty input, any string of zeros and the words false/off/no/n are false;
    everything else is true.
    """
    text = value.strip().lower()
    if not text or text.strip("0") == "":
        return False
    return text not in FALSE_WORDS


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def to_uint(value: str) -> int:
    """Parse a non-negative integer.

    Args:
        value: User input

    Returns:
        Parsed integer

    Raises:
        ValidationError: If the input is not a non-negative integer
    """
    text = value.strip()
    if not text.isdecimal():
        raise ValidationError("invalid integer")
    return int(text)


def to_double(value: str) -> float:
    try:
        number = float(value.strip())
    except ValueError:
        raise ValidationError("invalid number")
    if not math.isfinite(number):
        raise ValidationError("invalid number")
    return number


def format_double(value: float) -> str:
    return f"{value:.2f}"


_PARSERS = {
    VarType.STRING: lambda value: value,
    VarType.BOOLEAN: to_bool,
    VarType.INTEGER: to_uint,
    VarType.DOUBLE: to_double,
}

_FORMATTERS = {
    VarType.STRING: str,
    VarType.BOOLEAN: format_bool,
    VarType.INTEGER: str,
    VarType.DOUBLE: format_double,
}


def create_attribute_variable(
    name: str,
    var_type: VarType,
    attribute: str,
    description: str,
    default: Any = NO_RESET,
    flags: Permission = Permission.NONE,
) -> Variable:
    """Create a variable backed by a plain attribute of the scope object.

    Args:
        name: Variable name
        var_type: Scalar value type
        attribute: Attribute of the scope object holding the value
        description: One line description
        default: Value restored by Reset, or NO_RESET
        flags: Permissions required to set or reset

    Returns:
        Variable instance
    """
    if var_type == VarType.LIST:
        raise ValueError(f"List variable {name} needs explicit accessors")

    parse = _PARSERS[var_type]
    render = _FORMATTERS[var_type]

    def get_value(context: "CommandContext", target: Any) -> str:
        return render(getattr(target, attribute))

    def set_value(context: "CommandContext", target: Any, value: str) -> None:
        setattr(target, attribute, parse(value))

    reset_value = None
    if default is not NO_RESET:

        def reset_value(context: "CommandContext", target: Any) -> None:
            setattr(target, attribute, default)

    return Variable(
        name=name,
        type=var_type,
        description=description,
        get_func=get_value,
        set_func=set_value,
        reset_func=reset_value,
        flags=flags,
    )


def find_variables(variables, pattern: str):
    """Select the variables whose name matches a wildcard pattern.

    Args:
        variables: Variable table of one scope kind
        pattern: Wildcard pattern, matched ignoring case

    Returns:
        Matching variables in table order
    """
    return [variable for variable in variables if wildcmp(variable.name, pattern)]
