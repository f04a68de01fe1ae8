"""
spockscan.parsers.values - Coercion of textual tokens into typed values.

Shared by the data-table parser (source literals) and the result parsers
(``key: value`` parameter lists printed by the build tool).
"""

from __future__ import annotations

import re
from typing import Any

_INT_PATTERN = re.compile(r"-?\d+")
_FLOAT_PATTERN = re.compile(r"-?\d+\.\d+")
_PLACEHOLDER_PATTERN = re.compile(r"#([A-Za-z_]\w*)")

_OPENERS = {"(": ")", "[": "]", "{": "}"}


def _dequote(token: str) -> str | None:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    return None


def coerce_value(token: str) -> Any:
    """
    Convert a literal token into a typed value.

    ``-?\\d+`` becomes int, ``-?\\d+\\.\\d+`` float, ``true``/``false`` bool,
    ``null`` None, and single- or double-quoted text the unquoted string.
    Anything else is returned as the stripped token.
    """
    token = token.strip()
    if _INT_PATTERN.fullmatch(token):
        return int(token)
    if _FLOAT_PATTERN.fullmatch(token):
        return float(token)
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "null":
        return None
    unquoted = _dequote(token)
    if unquoted is not None:
        return unquoted
    return token


def coerce_parameter_value(token: str) -> Any:
    """
    Coerce a value printed in a build-tool iteration name.

    Same rules as coerce_value except that ``null`` stays the string
    "null"; existing consumers compare against that string.
    """
    token = token.strip()
    if token == "null":
        return "null"
    return coerce_value(token)


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """
    Split on a separator that is not inside quotes or brackets.

    Args:
        text: Text to split.
        separator: Single-character separator.

    Returns:
        The pieces, unstripped. An empty input yields an empty list.
    """
    if not text:
        return []

    parts: list[str] = []
    closers: list[str] = []
    quote: str | None = None
    current: list[str] = []

    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch in _OPENERS:
            closers.append(_OPENERS[ch])
        elif closers and ch == closers[-1]:
            closers.pop()
        elif ch == separator and not closers:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)

    parts.append("".join(current))
    return parts


def parse_parameters(text: str) -> dict[str, Any]:
    """
    Parse ``a: 1, b: "x"`` into an ordered mapping.

    Pieces without a ``key:`` prefix are ignored.
    """
    parameters: dict[str, Any] = {}
    for pair in split_top_level(text):
        pair = pair.strip()
        colon = pair.find(":")
        if colon <= 0:
            continue
        key = pair[:colon].strip()
        parameters[key] = coerce_parameter_value(pair[colon + 1 :])
    return parameters


def format_value(value: Any) -> str:
    """Render a coerced value the way Groovy prints it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        inner = ", ".join(f"{k}: {format_value(v)}" for k, v in value.items())
        return f"[{inner}]"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)


def build_display_name(method_name: str, data_values: dict[str, Any]) -> str:
    """
    Build the display name of one iteration.

    ``#name`` placeholders that match a data variable are substituted;
    unmatched placeholders stay verbatim. A name without placeholders gets
    a ``name [k: v, ...]`` suffix in column order.
    """
    if _PLACEHOLDER_PATTERN.search(method_name):

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in data_values:
                return format_value(data_values[key])
            return match.group(0)

        return _PLACEHOLDER_PATTERN.sub(substitute, method_name)

    rendered = ", ".join(f"{key}: {format_value(val)}" for key, val in data_values.items())
    return f"{method_name} [{rendered}]"
