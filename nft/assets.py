"""
ARC NFT Metadata Resolver - Asset Metadata Service

Entry point that loads an asset by index from the ledger and resolves its
metadata on the selected network.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional

from network.http import HTTPClient
from network.ledger import AlgorandLedgerClient, Network

from .resolver import MetadataResolver, UniversalARCMetadata
from .template import IPFSGateway


@dataclass
class NFTAsset:
    """An asset's on-chain params together with its resolved metadata."""

    index: int
    params: Dict[str, Any]
    arc_metadata: UniversalARCMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "params": self.params,
            "arc_metadata": self.arc_metadata.to_dict(),
        }


class AssetMetadataService:
    """Loads assets by index and resolves their ARC metadata."""

    def __init__(self, ledger: AlgorandLedgerClient, http: HTTPClient,
                 gateway: Optional[IPFSGateway] = None):
        self.ledger = ledger
        self.resolver = MetadataResolver(http, ledger, gateway=gateway,
                                         network=ledger.config.network)
        self.logger = logging.getLogger(__name__)

    async def get_asset_metadata(self, asset_id: int,
                                 network: Optional[Network] = None) -> NFTAsset:
        """
        Get all metadata for an asset.

        Args:
            asset_id: Asset index
            network: Network whose indexer holds the configuration history

        Returns:
            NFTAsset with params and resolved metadata

        Raises:
            AssetNotFoundError: If the asset does not exist
            MissingAssetParamsError: If the ledger returned no params
        """
        asset_info = await self.ledger.get_asset_by_index(asset_id)
        arc_metadata = await self.resolver.resolve(asset_info, network)

        if arc_metadata.is_empty():
            self.logger.info(f"No metadata could be resolved for asset {asset_id}")

        return NFTAsset(
            index=asset_id,
            params=asset_info.get("params") or {},
            arc_metadata=arc_metadata,
        )

    def get_asset_metadata_sync(self, asset_id: int,
                                network: Optional[Network] = None) -> NFTAsset:
        """Blocking variant for callers without an event loop."""
        return asyncio.run(self.get_asset_metadata(asset_id, network))
