"""
ARC NFT Metadata Resolver - Metadata Fetchers

One fetcher per ARC convention. Each performs the network reads its
convention implies and reduces the result to the same shape: an image URL,
an optional animation URL and the convention's metadata document.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from network.http import HTTPClient, FetchError
from network.ledger import AlgorandLedgerClient, Network

from .exceptions import MetadataError, MetadataParseError, MissingAssetParamsError
from .standards import get_asset_params
from .template import IPFSGateway, resolve_protocol, convert_potential_ipfs_to_https

logger = logging.getLogger(__name__)

ARC69_STANDARD = "arc69"


@dataclass
class FetchedMetadata:
    """Normalized output of one fetcher."""

    https_image_url: Optional[str] = None
    https_animation_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _media_urls(metadata: Any, gateway: Optional[IPFSGateway]) -> FetchedMetadata:
    if not isinstance(metadata, dict):
        metadata = {}
    return FetchedMetadata(
        https_image_url=convert_potential_ipfs_to_https(metadata.get("image"), gateway),
        https_animation_url=convert_potential_ipfs_to_https(metadata.get("animation_url"), gateway),
        metadata=metadata,
    )


async def fetch_arc3_metadata(asset_info: Dict[str, Any], http: HTTPClient,
                              gateway: Optional[IPFSGateway] = None) -> FetchedMetadata:
    """
    Fetch the document an ARC3 URL points at.

    A JSON response is read for ``image``/``animation_url``; any other
    content type means the URL is the image itself.

    Raises:
        MissingAssetParamsError: If the asset has no params
        MalformedAddressError: If the URL is a template and the reserve does not decode
        FetchError: If the URL is not fetchable or the request fails
        MetadataParseError: If a JSON response does not parse
    """
    params = get_asset_params(asset_info)
    if not params:
        raise MissingAssetParamsError()

    url = params.get("url")
    if not url:
        raise MetadataError("Missing url field.")

    # The reserve only matters for ARC3 metadata addressed by an ARC19 template
    https_url = resolve_protocol(url, params.get("reserve"), gateway)
    if not https_url.startswith(("https://", "http://")):
        raise FetchError(url, "unsupported url scheme")

    response = await http.get(https_url)
    if not response.is_json:
        return FetchedMetadata(https_image_url=https_url)

    try:
        metadata = response.json()
    except ValueError as e:
        raise MetadataParseError(https_url, str(e)) from e

    return _media_urls(metadata, gateway)


async def fetch_arc19_metadata(asset_info: Dict[str, Any], http: HTTPClient,
                               gateway: Optional[IPFSGateway] = None) -> FetchedMetadata:
    """
    Fetch the metadata JSON addressed by an ARC19 template and reserve address.

    Raises:
        MissingAssetParamsError: If the asset has no params
        MetadataError: If url or reserve is missing
        MalformedAddressError: If the reserve address does not decode
        FetchError: If the resolved URL is not fetchable or the request fails
        MetadataParseError: If the response is not JSON
    """
    params = get_asset_params(asset_info)
    if not params:
        raise MissingAssetParamsError()

    url = params.get("url")
    reserve = params.get("reserve")
    if not url or not reserve:
        raise MetadataError("Missing url or reserve field.")

    metadata_url = resolve_protocol(url, reserve, gateway)
    if not metadata_url.startswith(("https://", "http://")):
        raise FetchError(metadata_url, "template could not be resolved")

    response = await http.get(metadata_url)
    try:
        metadata = response.json()
    except ValueError as e:
        raise MetadataParseError(metadata_url, str(e)) from e

    return _media_urls(metadata, gateway)


def parse_arc69_note(note_b64: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode a transaction note and return it if it is ARC69 JSON.

    Non-printable characters are dropped before parsing. Returns None for
    missing, undecodable or non-ARC69 notes.
    """
    if not note_b64:
        return None

    try:
        note_text = base64.b64decode(note_b64).decode("utf-8", errors="ignore")
    except (binascii.Error, ValueError):
        logger.debug("Skipping note that is not base64")
        return None

    note_text = "".join(ch for ch in note_text.strip() if ch.isprintable())

    try:
        note = json.loads(note_text)
    except ValueError:
        logger.debug("Skipping note that is not JSON")
        return None

    if isinstance(note, dict) and note.get("standard") == ARC69_STANDARD:
        return note
    return None


async def fetch_arc69_metadata(asset_id: int, ledger: AlgorandLedgerClient,
                               network: Optional[Network] = None) -> Optional[Dict[str, Any]]:
    """
    Return the most recent ARC69 note from the asset's configuration history.

    Later configurations shadow earlier ones, so transactions are checked
    newest first and the first match wins. Returns None when no note matches.

    Raises:
        LedgerError: If the asset is unknown to the indexer
        FetchError: If the history query fails
    """
    transactions = await ledger.get_asset_config_transactions(asset_id, network)
    transactions = sorted(transactions, key=lambda tx: tx.round_time, reverse=True)

    for transaction in transactions:
        note = parse_arc69_note(transaction.note)
        if note is not None:
            logger.debug(f"ARC69 metadata for asset {asset_id} found in {transaction.txid}")
            return note

    return None
