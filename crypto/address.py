"""
ARC NFT Metadata Resolver - Algorand Address Codec

Thin wrapper around the algosdk address encoding. An Algorand address is the
base32 text of a 32-byte public key followed by a 4-byte checksum; the reserve
address of an ARC19 asset reuses those 32 bytes as a content digest.
"""

import binascii

from algosdk import encoding, error

from .exceptions import MalformedAddressError

ADDRESS_LENGTH = 58
PUBLIC_KEY_LENGTH = 32


def decode_address(address: str) -> bytes:
    """
    Decode an Algorand address to its 32 raw bytes.

    Args:
        address: Address text (58 characters)

    Returns:
        32-byte public key

    Raises:
        MalformedAddressError: If the text is not a valid address
    """
    if not isinstance(address, str) or not address:
        raise MalformedAddressError(f"Address must be a non-empty string, got {address!r}")

    try:
        public_key = encoding.decode_address(address)
    except (error.WrongKeyLengthError, error.WrongChecksumError,
            binascii.Error, ValueError) as e:
        raise MalformedAddressError(f"Invalid Algorand address {address!r}: {e.__class__.__name__}") from e

    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise MalformedAddressError(f"Decoded address has {len(public_key)} bytes, expected {PUBLIC_KEY_LENGTH}")

    return bytes(public_key)


def encode_address(public_key: bytes) -> str:
    """
    Encode 32 raw bytes as an Algorand address, including its checksum.

    Raises:
        MalformedAddressError: If the input is not exactly 32 bytes
    """
    if not isinstance(public_key, (bytes, bytearray)) or len(public_key) != PUBLIC_KEY_LENGTH:
        size = len(public_key) if isinstance(public_key, (bytes, bytearray)) else None
        raise MalformedAddressError(f"Address payload must be {PUBLIC_KEY_LENGTH} bytes, got {size}")

    return encoding.encode_address(bytes(public_key))


def is_valid_address(address: str) -> bool:
    """Check whether the text decodes as an Algorand address."""
    try:
        decode_address(address)
        return True
    except MalformedAddressError:
        return False
