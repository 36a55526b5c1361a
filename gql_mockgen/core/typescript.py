"""TypeScript source helpers: identifiers, string escaping and struct layout."""

import re

IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

INDENT = "  "

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def escape_string(value: str) -> str:
    """Escape text for use inside a double-quoted TypeScript string."""
    escaped = []
    for char in value:
        if char in _ESCAPES:
            escaped.append(_ESCAPES[char])
        elif ord(char) < 0x20 or char in "\u2028\u2029":
            escaped.append(f"\\u{ord(char):04x}")
        else:
            escaped.append(char)
    return "".join(escaped)


def string_literal(value: str) -> str:
    return f'"{escape_string(value)}"'


def needs_quotes(key: str) -> bool:
    """Keys that are not bare identifiers, and ``__typename``, get quoted."""
    return key == "__typename" or not IDENTIFIER.match(key)


def format_key(key: str) -> str:
    return string_literal(key) if needs_quotes(key) else key


def render_struct(entries: dict[str, str], depth: int = 0) -> str:
    """Lay out ``{ key: value, ... }`` one entry per line at ``depth``."""
    if not entries:
        return "{}"
    inner = INDENT * (depth + 1)
    lines = [f"{inner}{format_key(key)}: {value}" for key, value in entries.items()]
    return "{\n" + ",\n".join(lines) + "\n" + INDENT * depth + "}"


def ts_comment(text: str) -> str:
    """Make text safe for a single-line ``//`` comment."""
    if not text:
        return ""
    text = re.sub(r"\s+", " ", text.replace("\r", "").replace("\n", " "))
    if len(text) > 120:
        text = text[:117] + "..."
    return text.strip()
