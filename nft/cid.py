"""
ARC NFT Metadata Resolver - Content Identifier Codec

This module encodes and decodes IPFS content identifiers (CIDv0 and CIDv1) and
converts between a CID's sha2-256 digest and the Algorand reserve address that
carries it for ARC19 assets. Only the raw and dag-pb codecs and the sha2-256
multihash are supported.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Any, Optional, Tuple

import base58

from crypto.address import decode_address, encode_address
from crypto.exceptions import MalformedAddressError, UnsupportedEncodingError

logger = logging.getLogger(__name__)


class Multicodec(IntEnum):
    """Multicodec table entries understood by the codec."""
    RAW = 0x55
    DAG_PB = 0x70
    SHA2_256 = 0x12


SHA2_256_NAME = "sha2-256"
SHA2_256_LENGTH = 32

CODEC_NAMES: Dict[int, str] = {
    Multicodec.RAW: "raw",
    Multicodec.DAG_PB: "dag-pb",
}

CODEC_CODES: Dict[str, int] = {name: code for code, name in CODEC_NAMES.items()}

# Multibase prefixes accepted when decoding CIDv1 text
MULTIBASE_BASE32 = "b"
MULTIBASE_BASE32_UPPER = "B"
MULTIBASE_BASE58BTC = "z"
MULTIBASE_BASE16 = "f"
MULTIBASE_BASE16_UPPER = "F"

CIDV0_LENGTH = 46
CIDV0_PREFIX = "Qm"


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned LEB128 varint."""
    if value < 0:
        raise ValueError(f"Varint value must be non-negative: {value}")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode an unsigned LEB128 varint.

    Returns:
        Tuple of (value, offset of the first byte after the varint)

    Raises:
        MalformedAddressError: If the varint is truncated or longer than 9 bytes
    """
    value = 0
    shift = 0
    for index in range(offset, min(len(data), offset + 9)):
        byte = data[index]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, index + 1
        shift += 7

    raise MalformedAddressError("Truncated or oversized varint in content identifier")


def codec_name_from_code(code: int) -> Optional[str]:
    """Return 'raw' or 'dag-pb' for a supported multicodec code, else None."""
    return CODEC_NAMES.get(code)


def codec_code_from_name(name: str) -> int:
    """Return the multicodec code for a supported codec name."""
    try:
        return CODEC_CODES[name]
    except KeyError:
        raise UnsupportedEncodingError(f"Unsupported codec: {name}") from None


@dataclass(frozen=True)
class ContentAddress:
    """A parsed content identifier: version, codec and sha2-256 digest."""

    version: int
    codec_code: int
    digest: bytes
    hash_code: int = Multicodec.SHA2_256

    def __post_init__(self):
        if self.version not in (0, 1):
            raise UnsupportedEncodingError(f"Unsupported CID version: {self.version}")
        if self.hash_code != Multicodec.SHA2_256:
            raise UnsupportedEncodingError(f"Unsupported multihash function: 0x{self.hash_code:x}")
        if len(self.digest) != SHA2_256_LENGTH:
            raise MalformedAddressError(
                f"sha2-256 digest must be {SHA2_256_LENGTH} bytes, got {len(self.digest)}"
            )
        if self.version == 0 and self.codec_code != Multicodec.DAG_PB:
            raise UnsupportedEncodingError("CIDv0 only supports the dag-pb codec")

    @property
    def codec_name(self) -> Optional[str]:
        return codec_name_from_code(self.codec_code)

    @property
    def hash_algorithm(self) -> str:
        return SHA2_256_NAME

    @property
    def multihash(self) -> bytes:
        """Multihash bytes: function code, digest length, digest."""
        return encode_varint(self.hash_code) + encode_varint(len(self.digest)) + self.digest

    def to_bytes(self) -> bytes:
        """Binary CID form."""
        if self.version == 0:
            return self.multihash
        return encode_varint(self.version) + encode_varint(self.codec_code) + self.multihash

    def encode(self) -> str:
        """Textual CID form (base58btc for v0, lowercase base32 for v1)."""
        return encode_cid(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cid": self.encode(),
            "version": self.version,
            "codec": self.codec_name or f"0x{self.codec_code:x}",
            "hash": self.hash_algorithm,
            "digest": self.digest.hex(),
        }

    def __str__(self) -> str:
        return self.encode()


def _parse_multihash(data: bytes) -> Tuple[int, bytes]:
    """Split multihash bytes into (function code, digest)."""
    hash_code, offset = decode_varint(data)
    length, offset = decode_varint(data, offset)
    digest = data[offset:]

    if len(digest) != length:
        raise MalformedAddressError(
            f"Multihash declares {length} digest bytes but carries {len(digest)}"
        )
    if hash_code != Multicodec.SHA2_256:
        raise UnsupportedEncodingError(f"Unsupported multihash function: 0x{hash_code:x}")

    return hash_code, digest


def _decode_multibase(text: str) -> bytes:
    prefix, body = text[0], text[1:]
    if not body:
        raise MalformedAddressError(f"Empty content identifier body: {text!r}")

    try:
        if prefix in (MULTIBASE_BASE32, MULTIBASE_BASE32_UPPER):
            body = body.upper()
            padding = "=" * (-len(body) % 8)
            return base64.b32decode(body + padding)
        if prefix == MULTIBASE_BASE58BTC:
            return base58.b58decode(body)
        if prefix in (MULTIBASE_BASE16, MULTIBASE_BASE16_UPPER):
            return bytes.fromhex(body)
    except (binascii.Error, ValueError) as e:
        raise MalformedAddressError(f"Invalid multibase text {text!r}: {e}") from e

    raise MalformedAddressError(f"Unsupported multibase prefix {prefix!r} in {text!r}")


def decode_cid(text: str) -> ContentAddress:
    """
    Parse a textual content identifier.

    Args:
        text: CIDv0 ("Qm...") or multibase CIDv1 text

    Returns:
        Parsed ContentAddress

    Raises:
        MalformedAddressError: If the text is not a valid content identifier
        UnsupportedEncodingError: If the multihash is not sha2-256
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedAddressError(f"Content identifier must be a non-empty string, got {text!r}")

    text = text.strip()

    if len(text) == CIDV0_LENGTH and text.startswith(CIDV0_PREFIX):
        try:
            raw = base58.b58decode(text)
        except ValueError as e:
            raise MalformedAddressError(f"Invalid base58 CIDv0 {text!r}: {e}") from e
        hash_code, digest = _parse_multihash(raw)
        return ContentAddress(version=0, codec_code=Multicodec.DAG_PB, digest=digest, hash_code=hash_code)

    raw = _decode_multibase(text)
    version, offset = decode_varint(raw)
    if version != 1:
        raise MalformedAddressError(f"Unsupported CID version {version} in {text!r}")

    codec_code, offset = decode_varint(raw, offset)
    hash_code, digest = _parse_multihash(raw[offset:])

    return ContentAddress(version=version, codec_code=codec_code, digest=digest, hash_code=hash_code)


def encode_cid(address: ContentAddress) -> str:
    """Render a ContentAddress as text."""
    if address.version == 0:
        return base58.b58encode(address.multihash).decode("ascii")

    body = base64.b32encode(address.to_bytes()).decode("ascii").rstrip("=").lower()
    return MULTIBASE_BASE32 + body


def derive_from_reserve(reserve_address: str, codec_code: int, version: int) -> ContentAddress:
    """
    Build a content identifier from an ARC19 reserve address.

    The 32 bytes of the decoded address are used directly as the sha2-256
    digest; nothing is hashed.

    Raises:
        MalformedAddressError: If the reserve address does not decode
        UnsupportedEncodingError: If the codec or version is not supported
    """
    if codec_name_from_code(codec_code) is None:
        raise UnsupportedEncodingError(f"Unsupported codec code: 0x{codec_code:x}")

    digest = decode_address(reserve_address)
    return ContentAddress(version=version, codec_code=codec_code, digest=digest)


def reserve_address_from_digest(address: ContentAddress) -> str:
    """Encode a content identifier's digest as an Algorand reserve address."""
    return encode_address(address.digest)


@dataclass(frozen=True)
class IPFSHashProperties:
    """Values an ARC19 creator stores on chain for a pinned CID."""

    version: int
    codec: Optional[str]
    reserve_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "codec": self.codec,
            "reserve_address": self.reserve_address,
        }


def derive_ipfs_hash_properties(cid_text: str) -> IPFSHashProperties:
    """Decode a pinned CID into its version, codec name and reserve address."""
    address = decode_cid(cid_text)
    properties = IPFSHashProperties(
        version=address.version,
        codec=address.codec_name,
        reserve_address=reserve_address_from_digest(address),
    )
    logger.debug(f"Derived reserve {properties.reserve_address} from CID {cid_text}")
    return properties
