"""Reply formatting for the admin console.

Handles table rendering, wildcard filters and the prefixed reply lines
(``Error:``, ``Usage:``, ``Success:``) sent back to the client.
"""

import logging
import re
from functools import lru_cache
from typing import Dict, List, Sequence

from .interfaces import IReplySink

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile_wildcard(pattern: str) -> "re.Pattern[str]":
    """Translate a ``*``/``?`` wildcard into a case-insensitive regex.

    Every other character matches literally, so IRC names containing
    brackets or backslashes need no escaping.
    """
    parts: List[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def wildcmp(value: str, pattern: str) -> bool:
    """Match a value against a wildcard pattern, ignoring case.

    Args:
        value: String to test
        pattern: Pattern with ``*`` and ``?`` wildcards; empty matches all

    Returns:
        True if the whole value matches
    """
    if not pattern:
        return True
    return _compile_wildcard(pattern).fullmatch(value) is not None


def matches_filter(name: str, filter_text: str) -> bool:
    """Match a name by prefix or wildcard, as the List and Help filters do.

    Args:
        name: Variable name or command verb
        filter_text: User supplied filter; empty matches all

    Returns:
        True if the name starts with the filter or matches it as a wildcard
    """
    if not filter_text:
        return True
    return name.lower().startswith(filter_text.lower()) or wildcmp(name, filter_text)


BYTE_UNITS = (("TiB", 1024**4), ("GiB", 1024**3), ("MiB", 1024**2), ("KiB", 1024))


def format_bytes(count: int) -> str:
    """Render a byte count with a binary unit, e.g. '1.50 KiB'."""
    for unit, size in BYTE_UNITS:
        if count >= size:
            return f"{count / size:.2f} {unit}"
    return f"{count} B"


class Table:
    """Fixed-width text table.

    Example:
        table = Table(["Variable", "Description"])
        table.add_row(Variable="Nick (String)", Description="The default nick.")
        for line in table.lines():
            print(line)
    """

    def __init__(self, columns: Sequence[str]):
        """Initialize an empty table.

        Args:
            columns: Ordered column names
        """
        self.columns = list(columns)
        self.rows: List[Dict[str, str]] = []

    def add_row(self, **cells: str) -> None:
        """Append a row; missing cells are left blank.

        Args:
            **cells: Cell values keyed by column name

        Returns:
            None
        """
        unknown = set(cells) - set(self.columns)
        if unknown:
            raise KeyError(f"Unknown column(s): {', '.join(sorted(unknown))}")
        self.rows.append({column: str(cells.get(column, "")) for column in self.columns})

    @property
    def empty(self) -> bool:
        return not self.rows

    def lines(self) -> List[str]:
        """Render the table.

        Returns:
            Lines of the table, or an empty list for a table without rows
        """
        if self.empty:
            return []

        widths = [
            max([len(column)] + [len(row[column]) for row in self.rows])
            for column in self.columns
        ]

        separator = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

        def render(cells: List[str]) -> str:
            padded = (cell.ljust(width) for cell, width in zip(cells, widths))
            return "| " + " | ".join(padded) + " |"

        lines = [separator, render(self.columns), separator]
        for row in self.rows:
            lines.append(render([row[column] for column in self.columns]))
        lines.append(separator)
        return lines


class ReplyChannel:
    """Sends reply lines to a single query target.

    The target is fixed for the duration of one dispatch, so replies to
    ``alice/freenode`` end up in a query named after that address.
    """

    def __init__(self, sink: IReplySink, target: str):
        """Initialize reply channel.

        Args:
            sink: Line transport of the calling client
            target: Query name replies are sent from
        """
        self.sink = sink
        self.target = target

    def put_line(self, line: str) -> None:
        self.sink.put_module(self.target, line)

    def put_success(self, line: str) -> None:
        self.put_line(f"Success: {line}")

    def put_usage(self, syntax: str) -> None:
        self.put_line(f"Usage: {syntax}")

    def put_error(self, error: str) -> None:
        self.put_line(f"Error: {error}")

    def put_table(self, table: Table) -> None:
        """Send all lines of a table.

        Args:
            table: Non-empty table to send

        Returns:
            None
        """
        for line in table.lines():
            self.put_line(line)

    def put_table_or(self, table: Table, fallback: str) -> None:
        """Send a table, or a single fallback line if it has no rows.

        Args:
            table: Table to send
            fallback: Line sent instead of an empty table

        Returns:
            None
        """
        if table.empty:
            self.put_line(fallback)
        else:
            self.put_table(table)
