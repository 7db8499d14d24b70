"""
Borsh Encoding
==============

Borsh is the deterministic binary format used by on-chain programs for
instruction arguments and account state. Leaf metadata is hashed over its
borsh encoding, and the concurrent tree account is laid out with the same
little-endian primitives.

Encoding Rules
--------------

+----------------+--------------------------------------------------------+
| Type           | Encoding                                               |
+================+========================================================+
| bool           | 1 byte, 0x00 or 0x01                                   |
+----------------+--------------------------------------------------------+
| u8..u64        | little-endian, fixed width                             |
+----------------+--------------------------------------------------------+
| [u8; N]        | the N raw bytes                                        |
+----------------+--------------------------------------------------------+
| String         | u32 byte length, then UTF-8 bytes                      |
+----------------+--------------------------------------------------------+
| Vec<T>         | u32 element count, then each element                   |
+----------------+--------------------------------------------------------+
| Option<T>      | 0x00 for None, 0x01 then the value for Some            |
+----------------+--------------------------------------------------------+
| unit enum      | 1 byte variant index                                   |
+----------------+--------------------------------------------------------+

References:
----------
- https://borsh.io
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from .byte_arrays import BaseBytes
from .uint import BaseUint, Uint8, Uint32

T = TypeVar("T")
B = TypeVar("B", bound=BaseBytes)
U = TypeVar("U", bound=BaseUint)


def encode_bool(value: bool) -> bytes:
    """Encode a boolean as a single byte."""
    return b"\x01" if value else b"\x00"


def encode_string(value: str) -> bytes:
    """Encode a string as a u32 byte length followed by its UTF-8 bytes."""
    data = value.encode("utf-8")
    return Uint32(len(data)).encode_bytes() + data


def encode_option(value: T | None, encode: Callable[[T], bytes]) -> bytes:
    """Encode an optional value with a one-byte presence tag."""
    if value is None:
        return b"\x00"
    return b"\x01" + encode(value)


def encode_vec(items: Iterable[T], encode: Callable[[T], bytes]) -> bytes:
    """Encode a sequence as a u32 element count followed by each element."""
    encoded = [encode(item) for item in items]
    return Uint32(len(encoded)).encode_bytes() + b"".join(encoded)


def encode_enum(variant: int) -> bytes:
    """Encode a unit enum variant by its index."""
    return Uint8(variant).encode_bytes()


class BorshReader:
    """
    Sequential little-endian reader over an immutable buffer.

    Every read checks the remaining length, so a truncated buffer surfaces as a
    `ValueError` at the exact offset instead of as a silently short value.
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of bytes left to read."""
        return len(self._data) - self._offset

    def read_bytes(self, length: int) -> bytes:
        """Read exactly `length` raw bytes."""
        if length < 0:
            raise ValueError(f"Cannot read a negative length ({length})")
        if length > self.remaining:
            raise ValueError(
                f"Buffer ended at offset {self._offset}: needed {length} bytes, "
                f"{self.remaining} left"
            )
        chunk = self._data[self._offset : self._offset + length].tobytes()
        self._offset += length
        return chunk

    def read_uint(self, uint_type: type[U]) -> U:
        """Read a fixed-width little-endian unsigned integer."""
        return uint_type.decode_bytes(self.read_bytes(uint_type.get_byte_length()))

    def read_bool(self) -> bool:
        """Read a one-byte boolean, rejecting any value other than 0 or 1."""
        raw = self.read_bytes(1)[0]
        if raw > 1:
            raise ValueError(f"Invalid bool byte {raw:#04x} at offset {self._offset - 1}")
        return raw == 1

    def read_fixed(self, bytes_type: type[B]) -> B:
        """Read a fixed-length byte array."""
        return bytes_type(self.read_bytes(bytes_type.get_byte_length()))

    def skip(self, length: int) -> None:
        """Discard `length` bytes (padding)."""
        self.read_bytes(length)
