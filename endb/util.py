"""
Helpers shared by the facade and the CLI.

Serialization:
    serialize() / deserialize() are the default value hooks. Values are
    stored as JSON text. Binary values survive the round-trip: bytes are
    written as ":base64:<data>" and any string that already starts with
    ":" is escaped with one more ":".

Math:
    math(value, operation, operand) backs Endb.math().

Paths:
    Dotted property paths ("fizz.buzz") into nested dicts, used by the
    path argument of Endb.get/set/delete/has.
"""

from __future__ import annotations

import base64
import json
import numbers
import operator
from typing import Any, Callable

_BASE64_PREFIX = ":base64:"


# ━━━ Serialization ━━━


def serialize(value: Any) -> str:
    """Encode a value as JSON text, keeping bytes intact."""
    return json.dumps(_encode(value), ensure_ascii=False)


def deserialize(text: str | bytes) -> Any:
    """Decode JSON text produced by serialize()."""
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return _decode(json.loads(text))


def _encode(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _BASE64_PREFIX + base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, str):
        return ":" + value if value.startswith(":") else value
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, str):
        if value.startswith(_BASE64_PREFIX):
            return base64.b64decode(value[len(_BASE64_PREFIX):])
        if value.startswith(":"):
            return value[1:]
        return value
    if isinstance(value, dict):
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


# ━━━ Math ━━━


MATH_OPERATIONS: dict[str, Callable[[Any, Any], Any]] = {
    "add": operator.add,
    "addition": operator.add,
    "+": operator.add,
    "sub": operator.sub,
    "subtract": operator.sub,
    "subtraction": operator.sub,
    "-": operator.sub,
    "mult": operator.mul,
    "multiply": operator.mul,
    "multiplication": operator.mul,
    "*": operator.mul,
    "div": operator.truediv,
    "divide": operator.truediv,
    "division": operator.truediv,
    "/": operator.truediv,
    "exp": operator.pow,
    "exponent": operator.pow,
    "^": operator.pow,
    "mod": operator.mod,
    "modulo": operator.mod,
    "%": operator.mod,
}

RANDOM_OPERATIONS = frozenset({"random", "rand"})


def math(value: Any, operation: str, operand: Any) -> Any:
    """
    Apply a named arithmetic operation.

    Raises:
        ValueError: unknown operation name
        TypeError: value or operand is not numeric
        ZeroDivisionError: division or modulo by zero
    """
    try:
        func = MATH_OPERATIONS[operation.lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"Unsupported math operation: {operation!r}") from None

    for number in (value, operand):
        if not isinstance(number, numbers.Real):
            raise TypeError(
                f"Math operations need numbers, got {type(number).__name__}"
            )

    result = func(value, operand)
    # Keep integers integral when division is exact
    if isinstance(result, float) and result.is_integer() and _both_int(value, operand):
        return int(result)
    return result


def _both_int(a: Any, b: Any) -> bool:
    return (
        isinstance(a, int) and not isinstance(a, bool)
        and isinstance(b, int) and not isinstance(b, bool)
    )


# ━━━ Dotted paths ━━━


def split_path(path: str) -> list[str]:
    parts = [p for p in path.split(".") if p]
    if not parts:
        raise ValueError(f"Invalid property path: {path!r}")
    return parts


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Read obj["a"]["b"] for path "a.b"; default when any step is missing."""
    current = obj
    for part in split_path(path):
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return default
    return current


def has_path(obj: Any, path: str) -> bool:
    marker = object()
    return get_path(obj, path, marker) is not marker


def set_path(obj: Any, path: str, value: Any) -> dict:
    """
    Set a nested property, creating intermediate dicts.

    Non-dict values along the way are replaced. Returns the (possibly new)
    root dict.
    """
    root = obj if isinstance(obj, dict) else {}
    parts = split_path(path)
    current = root
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value
    return root


def delete_path(obj: Any, path: str) -> bool:
    """Remove a nested property. Returns True if it existed."""
    parts = split_path(path)
    parent = get_path(obj, ".".join(parts[:-1])) if len(parts) > 1 else obj
    if isinstance(parent, dict) and parts[-1] in parent:
        del parent[parts[-1]]
        return True
    return False
