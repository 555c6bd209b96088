"""
ARC NFT Metadata Resolver - NFT Metadata Package

This package resolves Algorand NFT metadata stored under the ARC3, ARC19 and
ARC69 conventions into one standard-agnostic record, including the content
identifier codec and template URL handling that ARC19 relies on.
"""

from .exceptions import (
    MetadataError,
    MissingAssetParamsError,
    MetadataParseError
)

from .cid import (
    ContentAddress,
    Multicodec,
    IPFSHashProperties,
    decode_cid,
    encode_cid,
    derive_from_reserve,
    reserve_address_from_digest,
    codec_name_from_code,
    codec_code_from_name,
    derive_ipfs_hash_properties
)

from .template import (
    IPFSGateway,
    TemplateCID,
    resolve_protocol,
    convert_potential_ipfs_to_https,
    parse_template_cid,
    build_arc19_template_url,
    build_arc3_url
)

from .standards import (
    ARCStandard,
    is_arc3_asset,
    is_arc19_asset,
    is_arc69_candidate,
    classify_asset
)

from .fetchers import (
    FetchedMetadata,
    fetch_arc3_metadata,
    fetch_arc19_metadata,
    fetch_arc69_metadata
)

from .resolver import (
    UniversalARCMetadata,
    MetadataResolver,
    extract_nft_metadata
)

from .metadata import (
    MetadataValidator,
    ValidationResult,
    validate_arc69_metadata
)

from .assets import (
    NFTAsset,
    AssetMetadataService
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "MetadataError",
    "MissingAssetParamsError",
    "MetadataParseError",

    # Content identifiers
    "ContentAddress",
    "Multicodec",
    "IPFSHashProperties",
    "decode_cid",
    "encode_cid",
    "derive_from_reserve",
    "reserve_address_from_digest",
    "codec_name_from_code",
    "codec_code_from_name",
    "derive_ipfs_hash_properties",

    # Template URLs
    "IPFSGateway",
    "TemplateCID",
    "resolve_protocol",
    "convert_potential_ipfs_to_https",
    "parse_template_cid",
    "build_arc19_template_url",
    "build_arc3_url",

    # Classification
    "ARCStandard",
    "is_arc3_asset",
    "is_arc19_asset",
    "is_arc69_candidate",
    "classify_asset",

    # Fetching and resolution
    "FetchedMetadata",
    "fetch_arc3_metadata",
    "fetch_arc19_metadata",
    "fetch_arc69_metadata",
    "UniversalARCMetadata",
    "MetadataResolver",
    "extract_nft_metadata",
    "NFTAsset",
    "AssetMetadataService",

    # Validation
    "MetadataValidator",
    "ValidationResult",
    "validate_arc69_metadata"
]
