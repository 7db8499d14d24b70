"""Tests for the Base58 codec."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from leaf_proof.types import Base58


class TestBase58:
    """Encoding and decoding of base58 strings."""

    @pytest.mark.parametrize(
        "data, encoded",
        [
            (b"", ""),
            (b"\x00", "1"),
            (b"\x00\x00\x01", "112"),
            (b"hello world", "StV1DL6CwTryKyV"),
            (b"\xff", "5Q"),
        ],
    )
    def test_known_vectors(self, data: bytes, encoded: str) -> None:
        """Known vectors encode and decode both ways."""
        assert Base58.encode(data) == encoded
        assert Base58.decode(encoded) == data

    def test_system_program_address(self) -> None:
        """Thirty-two zero bytes are the system program address."""
        assert Base58.encode(b"\x00" * 32) == "1" * 32

    @pytest.mark.parametrize("invalid", ["0", "O", "I", "l", "abc+", "with space"])
    def test_rejects_characters_outside_alphabet(self, invalid: str) -> None:
        """Ambiguous and non-alphabet characters are rejected."""
        with pytest.raises(ValueError, match="Invalid Base58 character"):
            Base58.decode(invalid)

    @given(st.binary(max_size=64))
    def test_leading_zeros_survive(self, data: bytes) -> None:
        """Leading zero bytes are preserved through encode and decode."""
        assert Base58.decode(Base58.encode(data)) == data
