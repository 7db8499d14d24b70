"""Unsigned Integer Type Tests."""

from typing import Any, Type

import pytest
from pydantic import ValidationError, create_model

from leaf_proof.types import BaseUint, Uint8, Uint16, Uint32, Uint64

ALL_UINT_TYPES = (Uint8, Uint16, Uint32, Uint64)
"""A collection of all Uint types to test against."""


@pytest.mark.parametrize("uint_class", ALL_UINT_TYPES)
def test_pydantic_validation_accepts_valid_int(uint_class: Type[BaseUint]) -> None:
    """Pydantic validation accepts an in-range integer and returns the Uint type."""
    model = create_model("Model", value=(uint_class, ...))

    instance: Any = model(value=10)
    assert isinstance(instance.value, uint_class)
    assert instance.value == uint_class(10)


@pytest.mark.parametrize("uint_class", ALL_UINT_TYPES)
@pytest.mark.parametrize("invalid_value", [1.0, "1", True, False, b"1"])
def test_rejects_values_that_only_coerce_to_int(
    uint_class: Type[BaseUint], invalid_value: Any
) -> None:
    """Floats, strings, bytes and booleans are never silently coerced."""
    model = create_model("Model", value=(uint_class, ...))
    with pytest.raises(ValidationError):
        model(value=invalid_value)

    with pytest.raises(TypeError):
        uint_class(invalid_value)


@pytest.mark.parametrize("uint_class", ALL_UINT_TYPES)
def test_range_bounds(uint_class: Type[BaseUint]) -> None:
    """The full range is accepted; one past either end overflows."""
    assert uint_class(0) == 0
    assert uint_class(2**uint_class.BITS - 1) == 2**uint_class.BITS - 1

    with pytest.raises(OverflowError):
        uint_class(-1)
    with pytest.raises(OverflowError):
        uint_class(2**uint_class.BITS)


@pytest.mark.parametrize(
    "value, encoded",
    [
        (Uint8(0xAB), b"\xab"),
        (Uint16(500), b"\xf4\x01"),
        (Uint32(1), b"\x01\x00\x00\x00"),
        (Uint64(0x0102030405060708), b"\x08\x07\x06\x05\x04\x03\x02\x01"),
    ],
)
def test_little_endian_encoding(value: BaseUint, encoded: bytes) -> None:
    """Integers encode little-endian at their fixed width."""
    assert value.encode_bytes() == encoded
    assert type(value).decode_bytes(encoded) == value


def test_decode_rejects_wrong_width() -> None:
    with pytest.raises(ValueError, match="expected 8, got 4"):
        Uint64.decode_bytes(b"\x00" * 4)


def test_json_serializes_as_int() -> None:
    model = create_model("Model", value=(Uint64, ...))
    assert model(value=Uint64(7)).model_dump(mode="json") == {"value": 7}
