"""
Utility functions for the dataclass to TypeScript generator.
"""

import re

# TypeScript identifiers usable with dot access
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def capitalize(text: str) -> str:
    """Uppercase every letter that follows a non-letter and drop whitespace.

    Examples:
        "someStruct" -> "SomeStruct"
        "data_point" -> "Data_Point"
        "my type" -> "MyType"

    Args:
        text: A type name

    Returns:
        The capitalized name
    """
    out = []
    last = ""
    for ch in text:
        previous, last = last, ch
        if ch.isspace():
            continue
        if not previous.isalpha() and ch.isalpha():
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def is_identifier(name: str) -> bool:
    """Check whether a name can be written as a bare TypeScript property."""
    return bool(_IDENTIFIER_PATTERN.match(name))


def property_name(name: str) -> str:
    """Format a property name for a declaration, quoting it when needed."""
    return name if is_identifier(name) else f"'{_escape(name)}'"


def member(obj: str, name: str) -> str:
    """Format a member access expression (`obj.name` or `obj['name']`)."""
    return f"{obj}.{name}" if is_identifier(name) else f"{obj}['{_escape(name)}']"


def _escape(name: str) -> str:
    return name.replace("\\", "\\\\").replace("'", "\\'")
