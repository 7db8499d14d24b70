"""Unsigned integer types with little-endian byte encodings."""

from __future__ import annotations

from typing import Any, ClassVar, SupportsInt

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from typing_extensions import Self


class BaseUint(int):
    """A base class for custom unsigned integer types that inherits from `int`."""

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create and validate a new Uint instance.

        Raises:
            TypeError: If `value` is a bool or not an integer.
            OverflowError: If `value` is outside the allowed range [0, 2**BITS - 1].
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected int for {cls.__name__}, got {type(value).__name__}")
        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise OverflowError(f"{int_value} is out of range for {cls.__name__}")
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> BaseUint:
            """Pydantic validation function that calls the class constructor."""
            try:
                return cls(value)
            except (OverflowError, TypeError) as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.int_schema(ge=0, lt=2**cls.BITS),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: int(instance)
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        """Hook into Pydantic's JSON Schema generation system."""
        json_schema = handler(core_schema)
        json_schema.update(format=f"uint{cls.BITS}")
        return json_schema

    @classmethod
    def get_byte_length(cls) -> int:
        """Get the byte length of this type."""
        return cls.BITS // 8

    def encode_bytes(self) -> bytes:
        """Serialize to little-endian bytes, the layout used by borsh and the tree account."""
        return int(self).to_bytes(self.get_byte_length(), "little")

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Deserialize from little-endian bytes of exactly the type's width."""
        expected_length = cls.get_byte_length()
        if len(data) != expected_length:
            raise ValueError(
                f"Invalid byte length for {cls.__name__}: "
                f"expected {expected_length}, got {len(data)}"
            )
        return cls(int.from_bytes(data, "little"))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class Uint8(BaseUint):
    """Unsigned 8-bit integer."""

    BITS = 8


class Uint16(BaseUint):
    """Unsigned 16-bit integer."""

    BITS = 16


class Uint32(BaseUint):
    """Unsigned 32-bit integer."""

    BITS = 32


class Uint64(BaseUint):
    """Unsigned 64-bit integer."""

    BITS = 64
