"""
Tests for the resolution orchestrator.
"""

import asyncio
from unittest.mock import patch

import pytest

from network.http import FetchError
from network.ledger import LedgerError, Network
from nft.exceptions import MissingAssetParamsError
from nft.fetchers import FetchedMetadata
from nft.resolver import MetadataResolver, UniversalARCMetadata, extract_nft_metadata
from nft.standards import ARCStandard
from nft.template import IPFSGateway
from tests.conftest import ARC19_RAW_TEMPLATE, CID_V1_RAW, RESERVE_ADDRESS, make_asset

ARC19_METADATA_URL = f"https://ipfs.io/ipfs/{CID_V1_RAW}"

ARC3_RESULT = FetchedMetadata(
    https_image_url="https://ipfs.io/ipfs/img3",
    https_animation_url="https://ipfs.io/ipfs/anim3",
    metadata={"name": "three", "shared": 3, "only3": True},
)
ARC19_RESULT = FetchedMetadata(
    https_image_url="https://ipfs.io/ipfs/img19",
    metadata={"name": "nineteen", "shared": 19, "only19": True},
)


@pytest.fixture
def resolver(fake_http, fake_ledger, gateway):
    return MetadataResolver(fake_http, fake_ledger, gateway=gateway)


def resolve(resolver, asset, network=None):
    return asyncio.run(resolver.resolve(asset, network))


def strategies(arc19, arc3):
    return patch("nft.resolver.STRATEGIES", ((ARCStandard.ARC19, arc19), (ARCStandard.ARC3, arc3)))


def returning(result):
    async def fetcher(asset_info, http, gateway=None):
        return result
    return fetcher


def failing(error):
    async def fetcher(asset_info, http, gateway=None):
        raise error
    return fetcher


class TestUniversalARCMetadata:
    """Test the normalized record."""

    def test_absent_fields_are_omitted(self):
        record = UniversalARCMetadata(standards=[ARCStandard.ARC3],
                                      https_image_url="https://x.io/i.png")

        assert record.to_dict() == {"standards": ["ARC3"], "https_image_url": "https://x.io/i.png"}
        assert not record.is_empty()

    def test_empty_record(self):
        record = UniversalARCMetadata(standards=[ARCStandard.CUSTOM])

        assert record.to_dict() == {"standards": ["CUSTOM"]}
        assert record.is_empty()


class TestClassifiedResolution:
    """Test resolution of assets with recognized standards."""

    def test_arc3_scenario(self, resolver, fake_http):
        fake_http.add_json("https://ipfs.io/ipfs/abc123", {"image": "ipfs://img1", "name": "Foo"})

        record = resolve(resolver, make_asset(url="ipfs://abc123#arc3"))

        assert record.standards == [ARCStandard.ARC3]
        assert record.https_image_url == "https://ipfs.io/ipfs/img1"
        assert record.arc3_metadata == {"image": "ipfs://img1", "name": "Foo"}
        assert record.arc19_metadata is None
        assert "arc19_metadata" not in record.to_dict()

    def test_arc3_scenario_with_other_gateway(self, fake_http, fake_ledger):
        gateway = IPFSGateway("https://gateway.example")
        fake_http.add_json("https://gateway.example/ipfs/abc123", {"image": "ipfs://img1"})
        resolver = MetadataResolver(fake_http, fake_ledger, gateway=gateway)

        record = resolve(resolver, make_asset(url="ipfs://abc123#arc3"))

        assert record.https_image_url == "https://gateway.example/ipfs/img1"

    def test_arc19_scenario(self, resolver, fake_http):
        fake_http.add_json(ARC19_METADATA_URL, {"image": "ipfs://bafyimg", "animation_url": "https://x.io/a.mp4"})

        record = resolve(resolver, make_asset(url=ARC19_RAW_TEMPLATE, reserve=RESERVE_ADDRESS))

        assert record.standards == [ARCStandard.ARC19]
        assert fake_http.requested == [ARC19_METADATA_URL]
        assert record.https_image_url == "https://ipfs.io/ipfs/bafyimg"
        assert record.https_animation_url == "https://x.io/a.mp4"
        assert record.arc19_metadata["animation_url"] == "https://x.io/a.mp4"

    def test_arc3_and_arc19_share_a_template(self, resolver, fake_http):
        fake_http.add_json(ARC19_METADATA_URL, {"image": "ipfs://bafyimg", "name": "both"})
        asset = make_asset(name="Cat@arc3", url=ARC19_RAW_TEMPLATE + "#arc3", reserve=RESERVE_ADDRESS)

        record = resolve(resolver, asset)

        assert record.standards == [ARCStandard.ARC3, ARCStandard.ARC19]
        assert record.arc3_metadata == record.arc19_metadata == {"image": "ipfs://bafyimg", "name": "both"}
        assert record.https_image_url == "https://ipfs.io/ipfs/bafyimg"

    def test_both_tags_arc19_takes_precedence(self, resolver):
        asset = make_asset(name="Cat@arc3", url=ARC19_RAW_TEMPLATE, reserve=RESERVE_ADDRESS)

        with strategies(returning(ARC19_RESULT), returning(ARC3_RESULT)):
            record = resolve(resolver, asset)

        assert record.standards == [ARCStandard.ARC3, ARCStandard.ARC19]
        assert record.https_image_url == "https://ipfs.io/ipfs/img19"
        # ARC19 has no animation, so the ARC3 one fills the gap
        assert record.https_animation_url == "https://ipfs.io/ipfs/anim3"
        assert record.arc19_metadata == ARC19_RESULT.metadata
        assert record.arc3_metadata == ARC3_RESULT.metadata

    def test_failed_standard_does_not_abort(self, resolver):
        asset = make_asset(name="Cat@arc3", url=ARC19_RAW_TEMPLATE, reserve=RESERVE_ADDRESS)

        with strategies(returning(ARC19_RESULT), failing(FetchError("https://x", "HTTP 500", 500))):
            record = resolve(resolver, asset)

        assert record.standards == [ARCStandard.ARC3, ARCStandard.ARC19]
        assert record.https_image_url == "https://ipfs.io/ipfs/img19"
        assert record.https_animation_url is None
        assert record.arc3_metadata is None

    def test_all_standards_fail_gives_empty_record(self, resolver):
        record = resolve(resolver, make_asset(url="ipfs://missing#arc3"))

        assert record.standards == [ARCStandard.ARC3]
        assert record.is_empty()

    def test_malformed_reserve_is_isolated(self, resolver):
        record = resolve(resolver, make_asset(url=ARC19_RAW_TEMPLATE, reserve="NOT-AN-ADDRESS"))

        assert record.standards == [ARCStandard.ARC19]
        assert record.is_empty()

    def test_missing_params(self, resolver):
        with pytest.raises(MissingAssetParamsError):
            resolve(resolver, {"index": 1})
        with pytest.raises(MissingAssetParamsError):
            resolve(resolver, None)

    def test_unexpected_errors_propagate(self, resolver, fake_http):
        fake_http.routes["https://ipfs.io/ipfs/abc123"] = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            resolve(resolver, make_asset(url="ipfs://abc123#arc3"))


class TestARC69Resolution:
    """Test note-embedded metadata in resolution."""

    def test_arc69_only(self, resolver, fake_ledger, fake_http):
        note = {"standard": "arc69", "description": "cat", "media_url": "ipfs://bafymedia"}
        fake_ledger.add_note(1000, note, round_time=10)

        record = resolve(resolver, make_asset(url="ipfs://bafymedia"))

        assert record.standards == [ARCStandard.ARC69]
        assert record.arc69_metadata == note
        assert record.https_image_url == "https://ipfs.io/ipfs/bafymedia"
        assert record.custom_metadata is None
        assert fake_http.requested == []

    def test_arc69_recency(self, resolver, fake_ledger):
        fake_ledger.add_note(1000, {"standard": "arc69", "description": "t1"}, round_time=1)
        fake_ledger.add_note(1000, {"standard": "other"}, round_time=2)
        fake_ledger.add_note(1000, {"standard": "arc69", "description": "t3"}, round_time=3)

        record = resolve(resolver, make_asset(url="https://x.io/cat.png"))

        assert record.arc69_metadata["description"] == "t3"
        assert record.https_image_url == "https://x.io/cat.png"

    def test_arc69_with_arc3(self, resolver, fake_http, fake_ledger):
        fake_ledger.add_note(1000, {"standard": "arc69"}, round_time=1)
        fake_http.add_json("https://ipfs.io/ipfs/abc123", {"image": "ipfs://img1"})

        record = resolve(resolver, make_asset(url="ipfs://abc123#arc3"))

        assert record.standards == [ARCStandard.ARC3, ARCStandard.ARC69]
        assert record.https_image_url == "https://ipfs.io/ipfs/img1"

    def test_ledger_failure_is_not_fatal(self, resolver, fake_http, fake_ledger):
        fake_ledger.history_errors[1000] = LedgerError("indexer down")
        fake_http.add_json("https://ipfs.io/ipfs/abc123", {"image": "ipfs://img1"})

        record = resolve(resolver, make_asset(url="ipfs://abc123#arc3"))

        assert record.standards == [ARCStandard.ARC3]
        assert record.arc69_metadata is None
        assert record.https_image_url == "https://ipfs.io/ipfs/img1"

    def test_network_selection(self, resolver, fake_ledger):
        resolve(resolver, make_asset(url="ipfs://x"), Network.TESTNET)
        resolve(resolver, make_asset(url="ipfs://x"))

        assert fake_ledger.history_requests == [(1000, Network.TESTNET), (1000, Network.MAINNET)]

    def test_no_asset_index_skips_history(self, resolver, fake_ledger):
        asset = make_asset(url="ipfs://x")
        del asset["index"]

        resolve(resolver, asset)

        assert fake_ledger.history_requests == []


class TestFallbackResolution:
    """Test the unrecognized-standard path."""

    def test_custom_tag_when_nothing_matches(self, resolver):
        record = resolve(resolver, make_asset(url="https://x.io/cat.png"))

        assert record.standards == [ARCStandard.CUSTOM]
        assert record.https_image_url is None
        assert record.custom_metadata is None
        # The asset URL itself is kept as the animation address
        assert record.https_animation_url == "https://x.io/cat.png"

    def test_custom_ipfs_url_becomes_animation(self, resolver):
        record = resolve(resolver, make_asset(url="ipfs://media"))

        assert record.standards == [ARCStandard.CUSTOM]
        assert record.https_animation_url == "https://ipfs.io/ipfs/media"

    def test_custom_unknown_scheme_resolves_nothing(self, resolver):
        record = resolve(resolver, make_asset(url="ar://media"))

        assert record.standards == [ARCStandard.CUSTOM]
        assert record.is_empty()

    def test_custom_uses_direct_fetch(self, resolver, fake_http):
        fake_http.add_json("https://x.io/meta.json", {"image": "ipfs://img", "name": "x"})

        record = resolve(resolver, make_asset(url="https://x.io/meta.json"))

        assert record.standards == [ARCStandard.CUSTOM]
        assert record.https_image_url == "https://ipfs.io/ipfs/img"
        assert record.custom_metadata == {"image": "ipfs://img", "name": "x"}
        assert record.arc3_metadata is None

    def test_custom_binary_content_is_the_image(self, resolver, fake_http):
        fake_http.add_binary("https://x.io/cat.png")

        record = resolve(resolver, make_asset(url="https://x.io/cat.png"))

        assert record.https_image_url == "https://x.io/cat.png"
        assert record.custom_metadata == {}

    def test_fallback_failures_are_logged(self, resolver, fake_http, caplog):
        fake_http.add_error("https://x.io/meta.json", 503)

        with caplog.at_level("WARNING", logger="nft.resolver"):
            record = resolve(resolver, make_asset(url="https://x.io/meta.json"))

        assert record.custom_metadata is None
        assert record.https_image_url is None
        assert any("ARC3 fetch failed" in message for message in caplog.messages)
        assert any("ARC19 fetch failed" in message for message in caplog.messages)

    def test_fallback_merge_prefers_arc19(self, resolver):
        with strategies(returning(ARC19_RESULT), returning(ARC3_RESULT)):
            record = resolve(resolver, make_asset(url="ipfs://abc"))

        assert record.standards == [ARCStandard.CUSTOM]
        assert record.https_image_url == "https://ipfs.io/ipfs/img19"
        assert record.https_animation_url == "https://ipfs.io/ipfs/anim3"
        assert record.custom_metadata == {
            "name": "nineteen", "shared": 19, "only19": True, "only3": True,
        }
        assert record.arc19_metadata is None

    def test_completion_order_does_not_change_precedence(self, resolver):
        async def run():
            arc3_done = asyncio.Event()

            async def slow_arc19(asset_info, http, gateway=None):
                await arc3_done.wait()
                return ARC19_RESULT

            async def fast_arc3(asset_info, http, gateway=None):
                arc3_done.set()
                return ARC3_RESULT

            with strategies(slow_arc19, fast_arc3):
                return await resolver.resolve(make_asset(url="ipfs://abc"))

        record = asyncio.run(run())

        assert record.https_image_url == "https://ipfs.io/ipfs/img19"
        assert record.custom_metadata["shared"] == 19

    def test_single_surviving_strategy(self, resolver):
        with strategies(failing(FetchError("https://x", "timeout")), returning(ARC3_RESULT)):
            record = resolve(resolver, make_asset(url="ipfs://abc"))

        assert record.https_image_url == "https://ipfs.io/ipfs/img3"
        assert record.custom_metadata == ARC3_RESULT.metadata


class TestExtractHelper:
    """Test the convenience entry point."""

    def test_extract_nft_metadata(self, fake_http, fake_ledger, gateway):
        fake_http.add_json("https://ipfs.io/ipfs/abc123", {"image": "ipfs://img1"})

        record = asyncio.run(extract_nft_metadata(make_asset(url="ipfs://abc123#arc3"),
                                                  fake_http, fake_ledger, Network.MAINNET, gateway))

        assert record.https_image_url == "https://ipfs.io/ipfs/img1"
