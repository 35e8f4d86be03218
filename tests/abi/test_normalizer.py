"""Tests for abipacks.abi.normalizer."""

from __future__ import annotations

import pytest

from abipacks.abi import FIRMWARE_TYPE_INDEX, UnsupportedTypeError, canonical_type, normalize, normalize_entry
from abipacks.models import ParamDef


def _function(name: str, *inputs: dict, mutability: str = "nonpayable") -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": list(inputs),
        "outputs": [],
    }


def test_transfer_maps_address_and_uint256() -> None:
    defs = normalize(
        [
            _function(
                "transfer",
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            )
        ]
    )

    assert len(defs) == 1
    definition = defs[0]
    assert definition.name == "transfer"
    assert definition.signature == "transfer(address,uint256)"
    assert definition.sig == "0xa9059cbb"
    assert definition.params == (
        ParamDef(name="to", type_index=FIRMWARE_TYPE_INDEX["address"]),
        ParamDef(name="amount", type_index=FIRMWARE_TYPE_INDEX["uint256"]),
    )
    assert [param.type_index for param in definition.params] == [1, 34]


def test_output_length_matches_supported_descriptors_and_keeps_order() -> None:
    raw = [
        _function("approve", {"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}),
        _function("balanceOf", {"name": "owner", "type": "address"}, mutability="view"),
        {"type": "event", "name": "Transfer", "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ]},
        _function("setFlag", {"name": "flag", "type": "bool"}),
    ]

    defs = normalize(raw)

    assert [definition.name for definition in defs] == ["approve", "balanceOf", "Transfer", "setFlag"]


def test_event_sig_is_full_topic_hash() -> None:
    defs = normalize(
        [
            {
                "type": "event",
                "name": "Transfer",
                "inputs": [
                    {"name": "from", "type": "address"},
                    {"name": "to", "type": "address"},
                    {"name": "value", "type": "uint256"},
                ],
            }
        ]
    )

    assert defs[0].sig == "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


def test_signed_integer_entry_is_dropped_not_replaced() -> None:
    raw = [
        _function("deposit", {"name": "amount", "type": "uint256"}),
        _function("adjust", {"name": "delta", "type": "int256"}),
        _function("withdraw", {"name": "amount", "type": "uint128"}),
    ]

    defs = normalize(raw)

    assert [definition.name for definition in defs] == ["deposit", "withdraw"]


def test_signed_integer_inside_tuple_drops_entry() -> None:
    raw = [
        _function(
            "swap",
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "amount", "type": "uint256"},
                    {"name": "tick", "type": "int24"},
                ],
            },
        )
    ]

    assert normalize(raw) == []


def test_tuple_over_max_arity_is_dropped() -> None:
    components = [{"name": f"f{i}", "type": "uint8"} for i in range(18)]
    raw = [
        _function("big", {"name": "data", "type": "tuple", "components": components}),
        _function("ok", {"name": "data", "type": "tuple", "components": components[:17]}),
    ]

    defs = normalize(raw)

    assert [definition.name for definition in defs] == ["ok"]
    assert defs[0].params[0].type_index == FIRMWARE_TYPE_INDEX["tuple17"]
    assert len(defs[0].params) == 18


def test_tuple_params_are_followed_by_components() -> None:
    raw = [
        _function(
            "exactInput",
            {
                "name": "params",
                "type": "tuple[]",
                "components": [
                    {"name": "path", "type": "bytes"},
                    {"name": "recipient", "type": "address"},
                    {"name": "fees", "type": "uint24[3]"},
                ],
            },
            {"name": "deadline", "type": "uint"},
        )
    ]

    definition = normalize(raw)[0]

    assert definition.signature == "exactInput((bytes,address,uint24[3])[],uint256)"
    assert definition.params == (
        ParamDef(name="params", type_index=FIRMWARE_TYPE_INDEX["tuple3"], is_array=True, array_size=0),
        ParamDef(name="path", type_index=FIRMWARE_TYPE_INDEX["bytes"]),
        ParamDef(name="recipient", type_index=FIRMWARE_TYPE_INDEX["address"]),
        ParamDef(name="fees", type_index=FIRMWARE_TYPE_INDEX["uint24"], is_array=True, array_size=3),
        ParamDef(name="deadline", type_index=FIRMWARE_TYPE_INDEX["uint256"]),
    )


def test_fixed_bytes_and_strings() -> None:
    definition = normalize(
        [
            _function(
                "register",
                {"name": "node", "type": "bytes32"},
                {"name": "label", "type": "string"},
                {"name": "ids", "type": "bytes4[]"},
            )
        ]
    )[0]

    assert [param.type_index for param in definition.params] == [100, 102, 72]
    assert definition.params[2].is_array is True
    assert definition.params[2].array_size == 0


def test_multi_dimensional_arrays_are_unsupported() -> None:
    raw = [_function("grid", {"name": "cells", "type": "uint8[2][2]"})]

    assert normalize(raw) == []


def test_constructor_fallback_and_unnamed_entries_are_skipped() -> None:
    raw = [
        {"type": "constructor", "inputs": [{"name": "owner", "type": "address"}]},
        {"type": "fallback", "stateMutability": "payable"},
        {"type": "receive", "stateMutability": "payable"},
        {"type": "error", "name": "Unauthorized", "inputs": []},
        _function("pause"),
    ]

    defs = normalize(raw)

    assert [definition.name for definition in defs] == ["pause"]
    assert defs[0].signature == "pause()"
    assert defs[0].params == ()


def test_skip_read_only_drops_view_and_pure_functions() -> None:
    raw = [
        _function("totalSupply", mutability="view"),
        _function("mint", {"name": "to", "type": "address"}),
        {"type": "function", "name": "legacy", "constant": True, "inputs": []},
        _function("version", mutability="pure"),
    ]

    assert [d.name for d in normalize(raw, skip_read_only=True)] == ["mint"]
    assert len(normalize(raw)) == 4


def test_empty_input_yields_empty_output() -> None:
    assert normalize([]) == []


def test_normalize_entry_raises_for_unknown_type() -> None:
    with pytest.raises(UnsupportedTypeError):
        normalize_entry(_function("weird", {"name": "x", "type": "fixed128x18"}))


def test_canonical_type_expands_nested_tuples() -> None:
    param = {
        "name": "order",
        "type": "tuple",
        "components": [
            {"name": "maker", "type": "address"},
            {
                "name": "asset",
                "type": "tuple[2]",
                "components": [{"name": "id", "type": "uint"}, {"name": "kind", "type": "uint8"}],
            },
        ],
    }

    assert canonical_type(param) == "(address,(uint256,uint8)[2])"
