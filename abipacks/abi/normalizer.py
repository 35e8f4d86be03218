"""Conversion of explorer ABI JSON into firmware definitions."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence

from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import ABIType, TupleType, normalize as normalize_type_str, parse
from web3 import Web3

from ..logging import get_logger
from ..models import NormalizedDef, ParamDef
from .types import UnsupportedTypeError, tuple_type_index, type_index

_SUPPORTED_KINDS = {"function", "event"}
_READ_ONLY_MUTABILITY = {"view", "pure"}

logger = get_logger("abi")


def normalize(
    raw_entries: Iterable[Mapping[str, Any]], *, skip_read_only: bool = False
) -> List[NormalizedDef]:
    """Normalize explorer ABI descriptors, keeping declaration order.

    Entries that use a type without firmware encoding are dropped whole.
    Constructors, fallback and receive entries carry no name and are skipped.
    """
    defs: List[NormalizedDef] = []
    for entry in raw_entries:
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type") or "function"
        name = entry.get("name")
        if kind not in _SUPPORTED_KINDS or not isinstance(name, str) or not name:
            continue
        if skip_read_only and kind == "function" and _is_read_only(entry):
            continue
        try:
            defs.append(normalize_entry(entry))
        except UnsupportedTypeError as exc:
            logger.debug("Skipping %s: %s", name, exc)
    return defs


def normalize_entry(entry: Mapping[str, Any]) -> NormalizedDef:
    """Normalize one descriptor or raise :class:`UnsupportedTypeError`."""
    name = str(entry["name"])
    inputs = _as_params(entry.get("inputs"))
    signature = f"{name}({','.join(canonical_type(param) for param in inputs)})"
    params: List[ParamDef] = []
    for param in inputs:
        params.extend(_param_defs(param))
    return NormalizedDef(
        name=name,
        signature=signature,
        sig=selector(signature, event=entry.get("type") == "event"),
        params=tuple(params),
    )


def canonical_type(param: Mapping[str, Any]) -> str:
    """Return the canonical type string, expanding ``tuple`` into its components."""
    raw_type = param.get("type")
    if not isinstance(raw_type, str) or not raw_type:
        raise UnsupportedTypeError(f"Parameter '{param.get('name', '')}' has no type")
    if raw_type.startswith("tuple"):
        suffix = raw_type[len("tuple"):]
        components = _as_params(param.get("components"))
        return f"({','.join(canonical_type(item) for item in components)}){suffix}"
    return normalize_type_str(raw_type)


def selector(signature: str, *, event: bool = False) -> str:
    """Keccak selector of a canonical signature (4 bytes, or the full topic for events)."""
    digest = Web3.keccak(text=signature)
    return Web3.to_hex(digest if event else digest[:4])


def _param_defs(param: Mapping[str, Any]) -> List[ParamDef]:
    abi_type = _parse(canonical_type(param))
    arrlist = abi_type.arrlist or ()
    if len(arrlist) > 1:
        raise UnsupportedTypeError(f"Multi-dimensional array '{abi_type.to_type_str()}'")
    is_array = bool(arrlist)
    array_size = arrlist[0][0] if is_array and arrlist[0] else 0
    name = str(param.get("name") or "")

    if isinstance(abi_type, TupleType):
        head = ParamDef(
            name=name,
            type_index=tuple_type_index(len(abi_type.components)),
            is_array=is_array,
            array_size=array_size,
        )
        children: List[ParamDef] = []
        for component in _as_params(param.get("components")):
            children.extend(_param_defs(component))
        return [head, *children]

    sub = abi_type.sub
    if isinstance(sub, tuple):
        raise UnsupportedTypeError(f"Fixed-point type '{abi_type.to_type_str()}'")
    scalar = abi_type.base if sub is None else f"{abi_type.base}{sub}"
    return [
        ParamDef(
            name=name,
            type_index=type_index(scalar),
            is_array=is_array,
            array_size=array_size,
        )
    ]


def _parse(type_str: str) -> ABIType:
    try:
        return parse(type_str)
    except (ParseError, ABITypeError) as exc:
        raise UnsupportedTypeError(f"Cannot parse type '{type_str}'") from exc


def _as_params(value: Any) -> Sequence[Mapping[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise UnsupportedTypeError("Malformed parameter list")
    return value


def _is_read_only(entry: Mapping[str, Any]) -> bool:
    return entry.get("stateMutability") in _READ_ONLY_MUTABILITY or entry.get("constant") is True


__all__ = ["canonical_type", "normalize", "normalize_entry", "selector"]
