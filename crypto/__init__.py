"""
ARC NFT Metadata Resolver - Address Encoding Module

This module provides the ledger-native address codec used to carry content
digests in an asset's reserve field.

Dependencies:
- py-algorand-sdk: Algorand address encoding with checksum
"""

from .exceptions import (
    CryptoError,
    MalformedAddressError,
    UnsupportedEncodingError,
)

from .address import (
    decode_address,
    encode_address,
    is_valid_address,
)

__all__ = [
    "CryptoError",
    "MalformedAddressError",
    "UnsupportedEncodingError",
    "decode_address",
    "encode_address",
    "is_valid_address",
]
