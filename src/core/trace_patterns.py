"""Fixed error-trace matchers (core domain).

Each matcher pairs a compiled pattern with the label and color tag used by the
summary and highlight steps. The table order is the summary line order.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Tuple

# "." that never crosses a line terminator.
_DOT = r"[^\n\r\u2028\u2029]"

# Whitespace as JavaScript defines it: includes U+FEFF, excludes \x1c-\x1f
# and U+0085, which Python's "\s" and str.strip() treat differently.
WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_WS = r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"

# Compiler-error file paths: letters, digits, slashes, dots, dashes,
# underscores (and the "]" / "^" the bracket range also admits).
_PATH_CHARS = r"[a-zA-Z0-9/\\.\]^_-]"


@dataclass(frozen=True)
class MatcherSpec:
    """One fixed error dialect: pattern plus display metadata."""

    pattern: re.Pattern
    label: str
    color: str


ERROR_LOCATION = MatcherSpec(
    pattern=re.compile(rf"Error:{_WS}+({_DOT}+?){_WS}+at{_WS}+({_DOT}+?):([0-9]+):([0-9]+)"),
    label="Error Location",
    color="red",
)

STACK_ENTRY = MatcherSpec(
    pattern=re.compile(rf"at{_WS}+({_DOT}+?){_WS}+\(({_DOT}+?):([0-9]+):([0-9]+)\)"),
    label="Stack Entry",
    color="orange",
)

COMPILER_ERROR = MatcherSpec(
    pattern=re.compile(
        rf"({_PATH_CHARS}+\.(?:ts|tsx|js|jsx))(?::|{_WS}*\(?)([0-9]+)"
        rf"(?::|{_WS}*,{_WS}*)([0-9]+)"
        rf"(?:\)?)?{_WS}*(?:-|–){_WS}*({_DOT}+)"
    ),
    label="Compiler Error",
    color="blue",
)

MISSING_MODULE = MatcherSpec(
    pattern=re.compile(rf"Cannot find module{_WS}*['\"]([^'\"]+)['\"]"),
    label="Missing Module",
    color="purple",
)

TYPE_ERROR = MatcherSpec(
    pattern=re.compile(
        rf"Type{_WS}+'({_DOT}+?)'{_WS}+is{_WS}+not{_WS}+assignable"
        rf"{_WS}+to{_WS}+type{_WS}+'({_DOT}+?)'"
    ),
    label="Type Error",
    color="teal",
)

REACT_ERROR = MatcherSpec(
    pattern=re.compile(
        rf"React{_DOT}createElement:{_WS}+type{_WS}+is{_WS}+invalid{_WS}+--"
        rf"{_WS}+expected{_WS}+a{_WS}+string{_WS}+or{_WS}+a{_WS}+class/function{_WS}+but{_WS}+got:{_WS}+({_DOT}+?)\."
    ),
    label="React Error",
    color="pink",
)

MATCHERS: Tuple[MatcherSpec, ...] = (
    ERROR_LOCATION,
    STACK_ENTRY,
    COMPILER_ERROR,
    MISSING_MODULE,
    TYPE_ERROR,
    REACT_ERROR,
)

# Summary line per label, formatted with the captured groups positionally.
SUMMARY_TEMPLATES = {
    ERROR_LOCATION.label: "Error in {1} at line {2}, column {3}: {0}",
    STACK_ENTRY.label: "Stack: {0} in {1} at line {2}",
    COMPILER_ERROR.label: "{0}:{1}:{2} - {3}",
    MISSING_MODULE.label: "Missing module: {0}",
    TYPE_ERROR.label: "Type '{0}' is not assignable to type '{1}'",
    REACT_ERROR.label: "React error: invalid element type {0}",
}

UNKNOWN_FORMAT = "Unknown error format"
