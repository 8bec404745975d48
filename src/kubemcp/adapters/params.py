"""Decode-with-default combinators for loosely typed tool arguments.

Tool arguments arrive as whatever JSON the client sent.  Nothing here
raises: an absent key, a value of the wrong JSON type, or a malformed
number all decode to the type's neutral default, which the argument
builders read as "flag omitted".

    params = Params({"namespace": "default", "tail": 20.9, "force": "yes"})
    params.string("namespace")   # "default"
    params.integer("tail")       # 20
    params.flag("force")         # False (not a JSON boolean)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def decode_string(value: Any, default: str = "") -> str:
    """Return *value* if it is a string, else *default*."""
    return value if isinstance(value, str) else default


def decode_bool(value: Any, default: bool = False) -> bool:
    """Return *value* if it is a JSON boolean, else *default*."""
    return value if isinstance(value, bool) else default


def decode_int(value: Any) -> int | None:
    """Return *value* truncated toward zero if it is a finite JSON number.

    Booleans are not numbers here, and neither are numeric strings.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def decode_string_list(value: Any) -> list[str]:
    """Return the string items of *value* if it is a JSON array, else ``[]``."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def decode_mapping(value: Any) -> dict[str, Any]:
    """Return a copy of *value* if it is a JSON object, else ``{}``."""
    if not isinstance(value, Mapping):
        return {}
    return {str(k): v for k, v in value.items()}


class Params:
    """Typed, defaulting view over one call's ``arguments`` object."""

    def __init__(self, arguments: Any) -> None:
        self._raw = decode_mapping(arguments)

    def string(self, key: str, default: str = "") -> str:
        return decode_string(self._raw.get(key), default)

    def flag(self, key: str) -> bool:
        return decode_bool(self._raw.get(key))

    def integer(self, key: str) -> int | None:
        return decode_int(self._raw.get(key))

    def strings(self, key: str) -> list[str]:
        return decode_string_list(self._raw.get(key))

    def mapping(self, key: str) -> dict[str, Any]:
        return decode_mapping(self._raw.get(key))

    def namespace_args(self, key: str = "namespace") -> list[str]:
        """``["-n", ns]`` when a non-empty namespace was supplied, else ``[]``."""
        ns = self.string(key)
        return ["-n", ns] if ns else []
