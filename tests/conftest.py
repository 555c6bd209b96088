"""
Pytest configuration and fixtures for arcnft tests.
"""

import base64
import json
from typing import Dict, List, Optional, Union

import pytest

from network.http import HTTPResponse, FetchError
from network.ledger import AssetConfigTransaction, AssetNotFoundError, LedgerConfig, Network
from nft.template import IPFSGateway

# One sha2-256 digest seen through every encoding the resolver handles
DIGEST_HEX = "c3c4733ec8affd06cf9e9ff50ffc6bcd2ec85a6170004bb709669c31de94391a"
RESERVE_ADDRESS = "YPCHGPWIV76QNT46T72Q77DLZUXMQWTBOAAEXNYJM2ODDXUUHENKJVBMXM"
CID_V0 = "QmbWqxBEKC3P8tqsKc98xmWNzrzDtRLMiMPL8wBuTGsMnR"
CID_V1_DAG_PB = "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"
CID_V1_RAW = "bafkreigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"
CID_V1_RAW_BASE58 = "zb2rhjpUSESZ3JQ65hRJhuReftqm8hibuf6d8BQSc5VDYqXz9"
ZERO_ADDRESS = "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAY5HFKQ"

ARC19_RAW_TEMPLATE = "template-ipfs://{ipfscid:1:raw:reserve:sha2-256}"


def json_response(url: str, data, content_type: str = "application/json") -> HTTPResponse:
    return HTTPResponse(url=url, status_code=200, content_type=content_type,
                        body=json.dumps(data).encode("utf-8"))


def binary_response(url: str, content_type: str = "image/png") -> HTTPResponse:
    return HTTPResponse(url=url, status_code=200, content_type=content_type, body=b"\x89PNG")


def encode_note(note: Union[Dict, str]) -> str:
    """Base64 note text as the indexer returns it."""
    text = note if isinstance(note, str) else json.dumps(note)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class FakeHTTPClient:
    """Async HTTP client serving canned responses keyed by URL."""

    def __init__(self, routes: Optional[Dict[str, Union[HTTPResponse, Exception]]] = None):
        self.routes = dict(routes or {})
        self.requested: List[str] = []

    def add_json(self, url: str, data, content_type: str = "application/json"):
        self.routes[url] = json_response(url, data, content_type)

    def add_binary(self, url: str, content_type: str = "image/png"):
        self.routes[url] = binary_response(url, content_type)

    def add_error(self, url: str, status_code: int = 500):
        self.routes[url] = FetchError(url, f"HTTP {status_code}", status_code)

    async def get(self, url: str) -> HTTPResponse:
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            raise FetchError(url, "HTTP 404 Not Found", 404)
        if isinstance(route, Exception):
            raise route
        return route

    async def get_json(self, url: str):
        response = await self.get(url)
        return response.json()


class FakeLedger:
    """Ledger reader backed by in-memory assets and acfg transactions."""

    def __init__(self, network: Network = Network.MAINNET):
        self.config = LedgerConfig(network=network)
        self.assets: Dict[int, Dict] = {}
        self.transactions: Dict[int, List[AssetConfigTransaction]] = {}
        self.history_errors: Dict[int, Exception] = {}
        self.history_requests: List = []

    def add_asset(self, asset_info: Dict):
        self.assets[asset_info["index"]] = asset_info

    def add_note(self, asset_id: int, note: Union[Dict, str, None], round_time: int,
                 txid: Optional[str] = None):
        encoded = encode_note(note) if note is not None else None
        self.transactions.setdefault(asset_id, []).append(
            AssetConfigTransaction(txid=txid or f"TX{round_time}", note=encoded, round_time=round_time)
        )

    async def get_asset_by_index(self, asset_id: int) -> Dict:
        if asset_id not in self.assets:
            raise AssetNotFoundError(asset_id)
        return self.assets[asset_id]

    async def get_asset_config_transactions(self, asset_id: int,
                                            network: Optional[Network] = None) -> List[AssetConfigTransaction]:
        self.history_requests.append((asset_id, network))
        if asset_id in self.history_errors:
            raise self.history_errors[asset_id]
        return list(self.transactions.get(asset_id, []))


def make_asset(index: int = 1000, name: str = "", url: Optional[str] = None,
               reserve: Optional[str] = None) -> Dict:
    params = {"name": name, "creator": ZERO_ADDRESS, "total": 1, "decimals": 0}
    if url is not None:
        params["url"] = url
    if reserve is not None:
        params["reserve"] = reserve
    return {"index": index, "params": params}


@pytest.fixture
def fake_http():
    """Create an empty fake HTTP client."""
    return FakeHTTPClient()


@pytest.fixture
def fake_ledger():
    """Create an empty mainnet fake ledger."""
    return FakeLedger()


@pytest.fixture
def gateway():
    """Public IPFS gateway used throughout the tests."""
    return IPFSGateway("https://ipfs.io")


@pytest.fixture
def reserve_address():
    """Reserve address whose 32 bytes are DIGEST_HEX."""
    return RESERVE_ADDRESS


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config file and return its path."""
    def _write(content: str, name: str = "arcnft.yml"):
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def clean_arcnft_env(monkeypatch):
    """Keep host ARCNFT_* variables out of configuration tests."""
    import os
    for key in list(os.environ):
        if key.startswith("ARCNFT_"):
            monkeypatch.delenv(key, raising=False)


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as a command line test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
