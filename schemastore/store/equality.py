"""
Structural equality over nested record values.

Record values are plain Python data: None, bool, int/float, str, lists
(or tuples) and dicts, nested to any depth. equal() is the only value
comparison used by filters and by the diff engine.

Invariants:
    - An absent dict key is UNDEFINED, which never equals None
    - bool never equals a number (True != 1), int equals float (1 == 1.0)
    - Sequences compare element-wise, in order
"""

from __future__ import annotations

from typing import Any


class _Undefined:
    """Marker for a value that is absent rather than null."""

    _instance = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def equal(a: Any, b: Any) -> bool:
    """Compare two values structurally.

    Args:
        a: Left value
        b: Right value

    Returns:
        True if both values have the same nested structure and contents
    """
    if a is b:
        return True
    if a is None or b is None or a is UNDEFINED or b is UNDEFINED:
        return False

    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if not (isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))):
            return False
        if len(a) != len(b):
            return False
        return all(equal(x, y) for x, y in zip(a, b))

    if isinstance(a, dict) or isinstance(b, dict):
        if not (isinstance(a, dict) and isinstance(b, dict)):
            return False
        keys = dict.fromkeys([*a, *b])
        return all(equal(a.get(k, UNDEFINED), b.get(k, UNDEFINED)) for k in keys)

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b
