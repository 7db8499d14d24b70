"""Hash primitive shared by leaf hashing and tree node hashing."""

from Crypto.Hash import keccak

from .byte_arrays import Bytes32


def keccak256(*chunks: bytes) -> Bytes32:
    """
    Compute keccak-256 over the concatenation of `chunks`.

    This is the original Keccak padding used by the compression programs,
    not the NIST SHA3-256 variant exposed by `hashlib.sha3_256`.
    """
    k = keccak.new(digest_bits=256)
    for chunk in chunks:
        k.update(chunk)
    return Bytes32(k.digest())
