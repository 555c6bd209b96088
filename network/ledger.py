"""
ARC NFT Metadata Resolver - Algorand Ledger Reader

This module reads asset parameters from an algod node and asset configuration
history from an indexer over their REST APIs. The network selector picks
which pair of endpoints is queried.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

from .http import HTTPClient, FetchError


class Network(str, Enum):
    """Algorand networks with public endpoints."""
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def from_flag(cls, is_mainnet: bool) -> 'Network':
        return cls.MAINNET if is_mainnet else cls.TESTNET


class LedgerError(Exception):
    """Base exception for ledger reader errors."""
    pass


class AssetNotFoundError(LedgerError):
    """Raised when an asset index does not exist."""

    def __init__(self, asset_id: int):
        self.asset_id = asset_id
        super().__init__(f"Asset {asset_id} not found")


@dataclass(frozen=True)
class NetworkEndpoints:
    """Algod and indexer base URLs for one network."""
    algod_url: str
    indexer_url: str


DEFAULT_ENDPOINTS: Dict[Network, NetworkEndpoints] = {
    Network.MAINNET: NetworkEndpoints(
        algod_url="https://mainnet-api.algonode.cloud",
        indexer_url="https://mainnet-idx.algonode.cloud",
    ),
    Network.TESTNET: NetworkEndpoints(
        algod_url="https://testnet-api.algonode.cloud",
        indexer_url="https://testnet-idx.algonode.cloud",
    ),
}


@dataclass
class LedgerConfig:
    """Configuration for the ledger reader."""
    network: Network = Network.MAINNET
    endpoints: Dict[Network, NetworkEndpoints] = field(
        default_factory=lambda: dict(DEFAULT_ENDPOINTS)
    )

    def get_endpoints(self, network: Optional[Network] = None) -> NetworkEndpoints:
        network = Network(network or self.network)
        try:
            return self.endpoints[network]
        except KeyError:
            raise ValueError(f"No endpoints configured for network {network.value}") from None

    @classmethod
    def from_env(cls) -> 'LedgerConfig':
        """Create ledger config from environment variables."""
        network = Network(os.getenv("ALGORAND_NETWORK", Network.MAINNET.value))
        endpoints = dict(DEFAULT_ENDPOINTS)
        defaults = endpoints[network]
        endpoints[network] = NetworkEndpoints(
            algod_url=os.getenv("ALGORAND_ALGOD_URL", defaults.algod_url),
            indexer_url=os.getenv("ALGORAND_INDEXER_URL", defaults.indexer_url),
        )
        return cls(network=network, endpoints=endpoints)


@dataclass
class AssetConfigTransaction:
    """One ``acfg`` transaction from the indexer."""
    txid: Optional[str]
    note: Optional[str]
    round_time: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssetConfigTransaction':
        return cls(
            txid=data.get("id"),
            note=data.get("note"),
            round_time=int(data.get("round-time") or 0),
        )


class AlgorandLedgerClient:
    """Reads asset parameters and configuration history."""

    def __init__(self, http: HTTPClient, config: Optional[LedgerConfig] = None):
        self.http = http
        self.config = config or LedgerConfig()
        self.logger = logging.getLogger(__name__)

    async def get_asset_by_index(self, asset_id: int) -> Dict[str, Any]:
        """
        Fetch an asset's on-chain parameters.

        Args:
            asset_id: Asset index

        Returns:
            Asset info dict with ``index`` and ``params``

        Raises:
            AssetNotFoundError: If the asset does not exist
            FetchError: On any other request failure
        """
        url = f"{self.config.get_endpoints().algod_url.rstrip('/')}/v2/assets/{asset_id}"
        try:
            asset_info = await self.http.get_json(url)
        except FetchError as e:
            if e.status_code == 404:
                raise AssetNotFoundError(asset_id) from e
            raise

        self.logger.debug(f"Loaded asset {asset_id}: {asset_info.get('params', {}).get('name')}")
        return asset_info

    async def get_asset_config_transactions(self, asset_id: int,
                                            network: Optional[Network] = None) -> List[AssetConfigTransaction]:
        """
        List an asset's configuration transactions in the order the indexer returns them.

        Raises:
            AssetNotFoundError: If the indexer does not know the asset
            FetchError: On any other request failure
        """
        indexer_url = self.config.get_endpoints(network).indexer_url.rstrip('/')
        url = f"{indexer_url}/v2/assets/{asset_id}/transactions?tx-type=acfg"
        try:
            response = await self.http.get_json(url)
        except FetchError as e:
            if e.status_code == 404:
                raise AssetNotFoundError(asset_id) from e
            raise

        transactions = [
            AssetConfigTransaction.from_dict(tx)
            for tx in response.get("transactions", [])
        ]
        self.logger.debug(f"Asset {asset_id} has {len(transactions)} acfg transactions")
        return transactions
