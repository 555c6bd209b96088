"""
ARC NFT Metadata Resolver - Resolution Orchestrator

This module combines classification and the per-standard fetchers into one
UniversalARCMetadata record. Standards are not mutually exclusive; when
several apply, ARC19 results take precedence over ARC3 results field by field.
When no standard is recognized every fetcher is tried and whatever succeeds
is kept.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Awaitable, Callable, Tuple

from crypto.exceptions import CryptoError
from network.http import HTTPClient, FetchError
from network.ledger import AlgorandLedgerClient, LedgerError, Network

from .exceptions import MetadataError, MissingAssetParamsError
from .fetchers import FetchedMetadata, fetch_arc3_metadata, fetch_arc19_metadata, fetch_arc69_metadata
from .standards import ARCStandard, classify_asset, get_asset_params
from .template import IPFSGateway, DEFAULT_GATEWAY, convert_potential_ipfs_to_https

# Errors isolated to a single strategy; anything else is a bug and propagates
STRATEGY_ERRORS = (FetchError, MetadataError, CryptoError, LedgerError)

Fetcher = Callable[[Dict[str, Any], HTTPClient, Optional[IPFSGateway]], Awaitable[FetchedMetadata]]

# Precedence order: ARC19 is the more specific convention when both URL shapes qualify
STRATEGIES: Tuple[Tuple[ARCStandard, Fetcher], ...] = (
    (ARCStandard.ARC19, fetch_arc19_metadata),
    (ARCStandard.ARC3, fetch_arc3_metadata),
)


@dataclass
class UniversalARCMetadata:
    """Standard-agnostic view of an asset's metadata."""

    standards: List[ARCStandard] = field(default_factory=list)
    https_image_url: Optional[str] = None
    https_animation_url: Optional[str] = None
    arc3_metadata: Optional[Dict[str, Any]] = None
    arc19_metadata: Optional[Dict[str, Any]] = None
    arc69_metadata: Optional[Dict[str, Any]] = None
    custom_metadata: Optional[Dict[str, Any]] = None

    def is_empty(self) -> bool:
        """True when no image, animation or metadata was resolved."""
        return len(self.to_dict()) == 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting fields that were not resolved."""
        result = {"standards": [standard.value for standard in self.standards]}

        if self.https_image_url is not None:
            result["https_image_url"] = self.https_image_url
        if self.https_animation_url is not None:
            result["https_animation_url"] = self.https_animation_url
        if self.arc3_metadata is not None:
            result["arc3_metadata"] = self.arc3_metadata
        if self.arc19_metadata is not None:
            result["arc19_metadata"] = self.arc19_metadata
        if self.arc69_metadata is not None:
            result["arc69_metadata"] = self.arc69_metadata
        if self.custom_metadata is not None:
            result["custom_metadata"] = self.custom_metadata

        return result


class MetadataResolver:
    """Resolves ARC3, ARC19 and ARC69 metadata for an asset."""

    def __init__(self, http: HTTPClient, ledger: AlgorandLedgerClient,
                 gateway: Optional[IPFSGateway] = None,
                 network: Network = Network.MAINNET):
        self.http = http
        self.ledger = ledger
        self.gateway = gateway or DEFAULT_GATEWAY
        self.network = network
        self.logger = logging.getLogger(__name__)

    async def resolve(self, asset_info: Dict[str, Any],
                      network: Optional[Network] = None) -> UniversalARCMetadata:
        """
        Resolve an asset's metadata under every applicable standard.

        Args:
            asset_info: Asset info as returned by the ledger (``index`` and ``params``)
            network: Network whose indexer holds the configuration history

        Returns:
            UniversalARCMetadata; may carry no image or metadata at all

        Raises:
            MissingAssetParamsError: If asset_info is missing or has no params
        """
        params = get_asset_params(asset_info)
        if not params:
            raise MissingAssetParamsError()

        network = network or self.network
        asset_id = asset_info.get("index")

        standards = classify_asset(asset_info)
        arc69_metadata = await self._fetch_arc69(asset_id, network)
        if arc69_metadata is not None:
            standards.append(ARCStandard.ARC69)

        record = UniversalARCMetadata(arc69_metadata=arc69_metadata)

        if not standards:
            standards.append(ARCStandard.CUSTOM)
            results = await self._run_strategies(asset_info, STRATEGIES)
            self._merge_media(record, results)
            record.custom_metadata = self._merge_custom_metadata(results)
            if record.https_animation_url is None:
                # Unrecognized URLs may point straight at the media
                record.https_animation_url = convert_potential_ipfs_to_https(
                    params.get("url"), self.gateway
                )
        else:
            selected = tuple((standard, fetcher) for standard, fetcher in STRATEGIES
                             if standard in standards)
            results = await self._run_strategies(asset_info, selected)
            self._merge_media(record, results)
            for standard, fetched in results:
                if standard == ARCStandard.ARC19:
                    record.arc19_metadata = fetched.metadata
                elif standard == ARCStandard.ARC3:
                    record.arc3_metadata = fetched.metadata

        if ARCStandard.ARC69 in standards and record.https_image_url is None:
            # ARC69 URLs point at the media itself
            record.https_image_url = convert_potential_ipfs_to_https(params.get("url"), self.gateway)

        record.standards = standards
        self.logger.info(
            f"Resolved asset {asset_id} as {', '.join(s.value for s in standards)}"
        )
        return record

    async def _fetch_arc69(self, asset_id: Optional[int],
                           network: Network) -> Optional[Dict[str, Any]]:
        if asset_id is None:
            return None
        try:
            return await fetch_arc69_metadata(asset_id, self.ledger, network)
        except STRATEGY_ERRORS as e:
            self.logger.warning(f"ARC69 lookup failed for asset {asset_id}: {e}")
            return None

    async def _run_strategies(self, asset_info: Dict[str, Any],
                              strategies: Tuple[Tuple[ARCStandard, Fetcher], ...]
                              ) -> List[Tuple[ARCStandard, FetchedMetadata]]:
        """
        Run fetchers concurrently and return the successes in strategy order.

        Completion order never affects the result; failures are logged and dropped.
        """
        outcomes = await asyncio.gather(
            *(fetcher(asset_info, self.http, self.gateway) for _, fetcher in strategies),
            return_exceptions=True
        )

        results = []
        for (standard, _), outcome in zip(strategies, outcomes):
            if isinstance(outcome, STRATEGY_ERRORS):
                self.logger.warning(
                    f"{standard.value} fetch failed for asset {asset_info.get('index')}: {outcome}"
                )
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            results.append((standard, outcome))

        return results

    @staticmethod
    def _merge_media(record: UniversalARCMetadata,
                     results: List[Tuple[ARCStandard, FetchedMetadata]]):
        """First present value wins, independently for image and animation."""
        for _, fetched in results:
            if record.https_image_url is None and fetched.https_image_url:
                record.https_image_url = fetched.https_image_url
            if record.https_animation_url is None and fetched.https_animation_url:
                record.https_animation_url = fetched.https_animation_url

    @staticmethod
    def _merge_custom_metadata(results: List[Tuple[ARCStandard, FetchedMetadata]]
                               ) -> Optional[Dict[str, Any]]:
        if not results:
            return None

        merged: Dict[str, Any] = {}
        # Apply lowest precedence first so earlier strategies overwrite shared keys
        for _, fetched in reversed(results):
            merged.update(fetched.metadata)
        return merged


async def extract_nft_metadata(asset_info: Dict[str, Any], http: HTTPClient,
                               ledger: AlgorandLedgerClient,
                               network: Network = Network.MAINNET,
                               gateway: Optional[IPFSGateway] = None) -> UniversalARCMetadata:
    """Resolve one asset's metadata with a throwaway resolver."""
    resolver = MetadataResolver(http, ledger, gateway=gateway, network=network)
    return await resolver.resolve(asset_info, network)
