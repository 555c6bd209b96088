"""
ARC NFT Metadata Resolver - Network Collaborators

HTTP fetching and Algorand ledger/indexer reads.
"""

from .http import HTTPClient, HTTPConfig, HTTPResponse, FetchError
from .ledger import (
    AlgorandLedgerClient,
    AssetConfigTransaction,
    AssetNotFoundError,
    LedgerConfig,
    LedgerError,
    Network,
    NetworkEndpoints,
    DEFAULT_ENDPOINTS
)

__all__ = [
    "HTTPClient",
    "HTTPConfig",
    "HTTPResponse",
    "FetchError",
    "AlgorandLedgerClient",
    "AssetConfigTransaction",
    "AssetNotFoundError",
    "LedgerConfig",
    "LedgerError",
    "Network",
    "NetworkEndpoints",
    "DEFAULT_ENDPOINTS"
]
