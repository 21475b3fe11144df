"""
Single-owner chunks.

Data layout:
- ID        (32 bytes)  owner-chosen identifier
- Signature (65 bytes)  R | S | V over the wrapped chunk
- Wrapped   (span + payload) a content-addressed chunk

The address is keccak256(ID || owner), where owner is the Ethereum address
recovered from the signature. It does not depend on the payload hash
directly, only through the signed wrapped address.
"""

from dataclasses import dataclass

import coincurve

from models.chunk import Chunk
from models.swarm import HASH_SIZE, SOC_MIN_CHUNK_SIZE, SOC_SIGNATURE_SIZE

from . import cac
from .bmt import keccak256

OWNER_SIZE = 20

_ETH_PREFIX = b"\x19Ethereum Signed Message:\n32"


class InvalidSocError(ValueError):
    """Raised when chunk data cannot be read as a single-owner chunk."""
    pass


def sign_digest(identifier: bytes, wrapped_address: bytes) -> bytes:
    """Digest the owner signs: keccak256(ID || wrapped address)."""
    return keccak256(identifier, wrapped_address)


def recover_owner(signature: bytes, digest: bytes) -> bytes:
    """Recover the 20-byte Ethereum address that produced signature over digest."""
    if len(signature) != SOC_SIGNATURE_SIZE:
        raise InvalidSocError(f"signature must be {SOC_SIGNATURE_SIZE} bytes, got {len(signature)}")
    recovery_id = signature[64]
    if recovery_id >= 27:
        recovery_id -= 27
    if recovery_id not in (0, 1):
        raise InvalidSocError(f"invalid recovery id {signature[64]}")
    message = keccak256(_ETH_PREFIX, digest)
    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            signature[:64] + bytes([recovery_id]), message, hasher=None,
        )
    except ValueError as e:
        raise InvalidSocError(f"signature recovery failed: {e}") from e
    return keccak256(public_key.format(compressed=False)[1:])[-OWNER_SIZE:]


def address_of(identifier: bytes, owner: bytes) -> bytes:
    return keccak256(identifier, owner)


@dataclass(frozen=True)
class SingleOwnerChunk:
    identifier: bytes
    signature: bytes
    wrapped: Chunk

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "SingleOwnerChunk":
        data = chunk.data
        if len(data) < SOC_MIN_CHUNK_SIZE:
            raise InvalidSocError(f"data of {len(data)} bytes shorter than {SOC_MIN_CHUNK_SIZE}")
        wrapped_data = data[HASH_SIZE + SOC_SIGNATURE_SIZE:]
        if not cac.valid_data_length(wrapped_data):
            raise InvalidSocError(f"wrapped chunk of {len(wrapped_data)} bytes has invalid length")
        return cls(
            identifier=data[:HASH_SIZE],
            signature=data[HASH_SIZE:HASH_SIZE + SOC_SIGNATURE_SIZE],
            wrapped=Chunk(address=cac.address_of(wrapped_data), data=wrapped_data),
        )

    @property
    def owner(self) -> bytes:
        return recover_owner(self.signature, sign_digest(self.identifier, self.wrapped.address))

    def address(self) -> bytes:
        return address_of(self.identifier, self.owner)


def valid(chunk: Chunk) -> bool:
    try:
        soc = SingleOwnerChunk.from_chunk(chunk)
        return soc.address() == chunk.address
    except InvalidSocError:
        return False
