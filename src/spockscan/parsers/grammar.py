"""
spockscan.parsers.grammar - Fixed vocabulary of the Spock dialect.

The lifecycle hook names and block labels are part of the language being
approximated, so they are constants rather than configuration.
"""

from __future__ import annotations

import re
from enum import Enum


class BlockLabel(str, Enum):
    """Block labels that mark a feature method."""

    GIVEN = "given"
    WHEN = "when"
    THEN = "then"
    EXPECT = "expect"
    WHERE = "where"


LIFECYCLE_METHODS = frozenset({"setup", "setupSpec", "cleanup", "cleanupSpec"})

# Bare-identifier methods must show a block label within this many lines
BLOCK_LABEL_LOOKAHEAD = 50
# The opening brace must appear within the next 4 lines
OPENING_BRACE_LOOKAHEAD = 4

CLASS_PATTERN = re.compile(
    r"^(?P<abstract>abstract\s+)?class\s+(?P<name>\w+)\s+extends\s+"
    r"(?:[\w.]*\.)?Specification\b"
)

# Any class-like declaration; used to detect nested classes in a class body
NESTED_CLASS_PATTERN = re.compile(
    r"^(?:(?:public|protected|private|static|final|abstract)\s+)*"
    r"(?:class|interface|enum|trait)\s+\w+"
)

METHOD_HEADER_PATTERN = re.compile(
    r"^(?:def|void)\s+"
    r"(?:(?P<quote>['\"])(?P<quoted>[^'\"]+)(?P=quote)|(?P<bare>[a-zA-Z_][a-zA-Z0-9_]*))"
    r"\s*(?:\([^)]*\))?\s*(?P<brace>\{)?\s*$"
)

BLOCK_LABEL_PATTERN = re.compile(
    r"^(?:" + "|".join(label.value for label in BlockLabel) + r")\s*:"
    r"(?:\s*(['\"]).*\1)?\s*$"
)

WHERE_LABEL = f"{BlockLabel.WHERE.value}:"

COMMENT_PREFIXES = ("//", "/*", "*")


def is_comment(stripped: str) -> bool:
    """True when a stripped line is a comment line."""
    return stripped.startswith(COMMENT_PREFIXES)


def brace_delta(text: str) -> int:
    """Count of ``{`` minus count of ``}`` in a line."""
    return text.count("{") - text.count("}")
