"""Firmware parameter type table.

Indexes follow the wallet firmware's ABI decoder. Signed integers occupy
35-68 on the device but have no supported encoding, so they are left out of
the table on purpose; looking one up raises :class:`UnsupportedTypeError`.
"""

from __future__ import annotations

from typing import Dict

ADDRESS = 1
BOOL = 2
UINT8 = 3
BYTES1 = 69
BYTES = 101
STRING = 102
TUPLE1 = 103
MAX_TUPLE_ARITY = 17


class UnsupportedTypeError(ValueError):
    """Raised when an ABI type has no firmware encoding."""


def _build_table() -> Dict[str, int]:
    table: Dict[str, int] = {"address": ADDRESS, "bool": BOOL}
    for offset, bits in enumerate(range(8, 257, 8)):
        table[f"uint{bits}"] = UINT8 + offset
    for size in range(1, 33):
        table[f"bytes{size}"] = BYTES1 + size - 1
    table["bytes"] = BYTES
    table["string"] = STRING
    for arity in range(1, MAX_TUPLE_ARITY + 1):
        table[f"tuple{arity}"] = TUPLE1 + arity - 1
    return table


FIRMWARE_TYPE_INDEX: Dict[str, int] = _build_table()


def type_index(type_name: str) -> int:
    """Return the firmware index for a scalar type name such as ``uint256``."""
    try:
        return FIRMWARE_TYPE_INDEX[type_name]
    except KeyError:
        raise UnsupportedTypeError(f"No firmware encoding for '{type_name}'") from None


def tuple_type_index(arity: int) -> int:
    if arity < 1 or arity > MAX_TUPLE_ARITY:
        raise UnsupportedTypeError(f"Tuples of arity {arity} are not supported")
    return FIRMWARE_TYPE_INDEX[f"tuple{arity}"]


__all__ = [
    "FIRMWARE_TYPE_INDEX",
    "MAX_TUPLE_ARITY",
    "UnsupportedTypeError",
    "tuple_type_index",
    "type_index",
]
