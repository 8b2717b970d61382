"""
Helper functions available inside expressions.

Every compiled expression can call these by name, e.g.
${!jsonpath('$.user.id', payload)} or ${!format_date(meta('ts'), '%Y-%m-%d')}.
"""

import json
from collections.abc import Sized
from functools import lru_cache
from typing import Any, Callable, Dict

from dateutil import parser as date_parser
from jsonpath_ng import parse as jsonpath_parse


@lru_cache(maxsize=256)
def _compile_jsonpath(query: str):
    return jsonpath_parse(query)


class ExpressionFunctions:
    """Implements the functions exposed to expressions."""

    @staticmethod
    def len(items: Any) -> int:
        """Return the length of a sized value, 0 for anything else."""
        if isinstance(items, Sized):
            return len(items)
        return 0

    @staticmethod
    def sum(items: Any) -> float:
        """Sum numeric values, parsing numeric strings and skipping the rest."""
        if isinstance(items, (str, bytes)) or not isinstance(items, (list, tuple)):
            return 0.0

        total = 0.0
        for item in items:
            if isinstance(item, bool):
                continue
            if isinstance(item, (int, float)):
                total += item
            elif isinstance(item, str):
                try:
                    total += float(item.strip())
                except ValueError:
                    continue
        return total

    @staticmethod
    def jsonpath(query: str, data: Any) -> Any:
        """
        Return the first match of a JSONPath query.

        Args:
            query: JSONPath expression (e.g., "$.user.id")
            data: Object to query, or JSON text/bytes to parse first

        Returns:
            First matching value, or "" when nothing matches or the
            data is not valid JSON
        """
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8", errors="replace")
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                return ""

        matches = _compile_jsonpath(query).find(data)
        return matches[0].value if matches else ""

    @staticmethod
    def format_date(value: Any, format_str: str) -> Any:
        """
        Format a date string with a strftime pattern.

        Examples:
            >>> ExpressionFunctions.format_date('2025-12-01', '%b %d, %Y')
            'Dec 01, 2025'

        Unparsable input is returned unchanged.
        """
        try:
            dt = date_parser.parse(str(value))
        except (ValueError, OverflowError):
            return value
        return dt.strftime(format_str)

    @classmethod
    def as_globals(cls) -> Dict[str, Callable[..., Any]]:
        """Name to function mapping installed into the expression environment."""
        return {
            "len": cls.len,
            "sum": cls.sum,
            "jsonpath": cls.jsonpath,
            "format_date": cls.format_date,
        }
