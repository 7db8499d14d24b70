"""Tests for data, creator and leaf hashing."""

from __future__ import annotations

import pytest
from Crypto.Hash import keccak
from hypothesis import given
from hypothesis import strategies as st

from leaf_proof.subspecs.hashing import (
    Creator,
    LeafSchema,
    MetadataArgs,
    TokenStandard,
    UseMethod,
    Uses,
    check_metadata,
    compute_creator_hash,
    compute_data_hash,
    compute_leaf_hash,
)
from leaf_proof.types import Bytes32, MalformedMetadataError, Pubkey, Uint8, Uint16, Uint64
from tests.leaf_proof.helpers import make_bytes32, make_creators, make_metadata, make_pubkey


def _keccak(data: bytes) -> bytes:
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def _creator(seed: str, share: int, verified: bool = False) -> Creator:
    return Creator(address=make_pubkey(seed), verified=verified, share=Uint8(share))


class TestCreatorHash:
    """Creator attribution hashing."""

    def test_matches_manual_layout(self) -> None:
        """Each creator contributes address, verified byte and share byte."""
        first = _creator("a", 60, verified=True)
        second = _creator("b", 40)
        expected = _keccak(
            bytes(first.address) + b"\x01\x3c" + bytes(second.address) + b"\x00\x28"
        )

        assert compute_creator_hash([first, second]) == expected

    def test_is_order_sensitive(self) -> None:
        """Reordering the same creators changes the digest."""
        first, second = _creator("a", 50), _creator("b", 50)
        assert compute_creator_hash([first, second]) != compute_creator_hash([second, first])

    def test_verified_flag_is_committed(self) -> None:
        assert compute_creator_hash([_creator("a", 100)]) != compute_creator_hash(
            [_creator("a", 100, verified=True)]
        )

    def test_empty_list_is_hash_of_nothing(self) -> None:
        assert compute_creator_hash([]) == _keccak(b"")

    def test_share_sum_is_not_checked(self) -> None:
        """Shares summing past 100 are still hashed; the issuing program enforces sums."""
        compute_creator_hash([_creator("a", 100), _creator("b", 100)])

    def test_rejects_too_many_creators(self) -> None:
        creators = [_creator(str(i), 10) for i in range(6)]
        with pytest.raises(MalformedMetadataError) as exc_info:
            compute_creator_hash(creators)
        assert exc_info.value.field == "creators"

    def test_rejects_share_above_100(self) -> None:
        with pytest.raises(MalformedMetadataError) as exc_info:
            compute_creator_hash([_creator("a", 10), _creator("b", 101)])
        assert exc_info.value.field == "creators[1].share"

    @given(st.lists(st.integers(min_value=0, max_value=100), max_size=5))
    def test_deterministic(self, shares: list[int]) -> None:
        """Identical input always yields the identical digest."""
        creators = [_creator(str(i), share) for i, share in enumerate(shares)]
        assert compute_creator_hash(creators) == compute_creator_hash(list(creators))


class TestDataHash:
    """Metadata hashing."""

    def test_matches_manual_layout(self) -> None:
        """The borsh encoding is hashed, then rehashed with the little-endian fee."""
        creator = _creator("a", 100)
        metadata = MetadataArgs(
            name="A",
            symbol="B",
            uri="u",
            seller_fee_basis_points=Uint16(500),
            primary_sale_happened=False,
            is_mutable=True,
            creators=[creator],
        )

        encoded = (
            b"\x01\x00\x00\x00A"
            + b"\x01\x00\x00\x00B"
            + b"\x01\x00\x00\x00u"
            + b"\xf4\x01"  # seller fee
            + b"\x00"  # primary sale
            + b"\x01"  # mutable
            + b"\x00"  # no edition nonce
            + b"\x01\x00"  # non-fungible
            + b"\x00"  # no collection
            + b"\x00"  # no uses
            + b"\x00"  # original token program
            + b"\x01\x00\x00\x00"
            + bytes(creator.address)
            + b"\x00\x64"
        )
        assert metadata.encode_bytes() == encoded
        assert compute_data_hash(metadata) == _keccak(_keccak(encoded) + b"\xf4\x01")

    def test_independent_of_construction_order(self) -> None:
        """Keyword order never reaches the encoding."""
        creators = make_creators()
        forward = MetadataArgs(
            name="n",
            symbol="s",
            uri="u",
            seller_fee_basis_points=Uint16(1),
            primary_sale_happened=True,
            is_mutable=False,
            creators=creators,
        )
        backward = MetadataArgs(
            creators=creators,
            is_mutable=False,
            primary_sale_happened=True,
            seller_fee_basis_points=Uint16(1),
            uri="u",
            symbol="s",
            name="n",
        )
        assert compute_data_hash(forward) == compute_data_hash(backward)

    @pytest.mark.parametrize(
        "change",
        [
            {"name": "Leaf #2"},
            {"uri": "https://example.com/other.json"},
            {"seller_fee_basis_points": 501},
            {"primary_sale_happened": True},
            {"edition_nonce": 0},
            {"collection": Pubkey(b"\x09" * 32)},
        ],
    )
    def test_every_field_is_committed(self, change: dict) -> None:
        assert compute_data_hash(make_metadata(**change)) != compute_data_hash(make_metadata())

    def test_optional_fields_encode_when_present(self) -> None:
        metadata = make_metadata().model_copy(
            update={
                "token_standard": TokenStandard.FUNGIBLE,
                "uses": Uses(use_method=UseMethod.SINGLE, remaining=Uint64(1), total=Uint64(1)),
            }
        )
        # Some(fungible), no collection, Some(single use, 1 of 1).
        expected = b"\x01\x02" + b"\x00" + b"\x01\x02" + (1).to_bytes(8, "little") * 2
        assert expected in metadata.encode_bytes()
        assert compute_data_hash(metadata) != compute_data_hash(make_metadata())

    @pytest.mark.parametrize(
        "field, value",
        [
            ("name", "n" * 33),
            ("symbol", "s" * 11),
            ("uri", "u" * 201),
            ("seller_fee_basis_points", 10_001),
        ],
    )
    def test_rejects_out_of_range_fields(self, field: str, value: object) -> None:
        metadata = make_metadata(**{field: value})
        with pytest.raises(MalformedMetadataError) as exc_info:
            compute_data_hash(metadata)
        assert exc_info.value.field == field

    def test_name_limit_counts_bytes_not_characters(self) -> None:
        """Sixteen two-byte characters fit the 32-byte limit; seventeen do not."""
        check_metadata(make_metadata(name="é" * 16))
        with pytest.raises(MalformedMetadataError):
            check_metadata(make_metadata(name="é" * 17))


class TestLeafHash:
    """Leaf schema hashing."""

    def _leaf(self, **overrides: object) -> LeafSchema:
        fields: dict = {
            "id": make_pubkey("asset"),
            "owner": make_pubkey("owner"),
            "nonce": Uint64(5),
            "data_hash": make_bytes32("data"),
            "creator_hash": make_bytes32("creators"),
        }
        fields.update(overrides)
        return LeafSchema(**fields)

    def test_matches_manual_layout(self) -> None:
        leaf = self._leaf(delegate=make_pubkey("delegate"))
        expected = _keccak(
            b"\x01"
            + bytes(leaf.id)
            + bytes(leaf.owner)
            + bytes(make_pubkey("delegate"))
            + (5).to_bytes(8, "little")
            + bytes(leaf.data_hash)
            + bytes(leaf.creator_hash)
        )
        assert compute_leaf_hash(leaf) == expected

    def test_absent_delegate_is_owner(self) -> None:
        """A leaf without a delegate hashes as if the owner were its delegate."""
        owner = make_pubkey("owner")
        assert self._leaf().leaf_delegate == owner
        assert compute_leaf_hash(self._leaf()) == compute_leaf_hash(self._leaf(delegate=owner))

    def test_transfer_changes_hash(self) -> None:
        assert compute_leaf_hash(self._leaf()) != compute_leaf_hash(
            self._leaf(owner=make_pubkey("new-owner"))
        )

    def test_index_is_committed(self) -> None:
        leaf = self._leaf(nonce=Uint64(6))
        assert leaf.index == 6
        assert compute_leaf_hash(leaf) != compute_leaf_hash(self._leaf())

    def test_returns_bytes32(self) -> None:
        assert isinstance(compute_leaf_hash(self._leaf()), Bytes32)
