"""
ARC NFT Metadata Resolver - Codec Exceptions

This module defines custom exceptions for address and content identifier encoding.
"""


class CryptoError(Exception):
    """Base exception for all address and content identifier errors."""
    pass


class MalformedAddressError(CryptoError):
    """Raised when a ledger address or content identifier text does not parse."""
    pass


class UnsupportedEncodingError(CryptoError):
    """Raised when a codec, hash function or CID version is not supported."""
    pass
