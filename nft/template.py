"""
ARC NFT Metadata Resolver - Template URI Resolution

This module turns a stored asset URL into a fetchable HTTPS address. ARC19
assets store a template such as

    template-ipfs://{ipfscid:1:raw:reserve:sha2-256}

whose content identifier is rebuilt from the asset's reserve address. Plain
``ipfs://`` URLs are routed through an IPFS gateway and ``https://`` URLs are
returned as they are.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional

from crypto.exceptions import UnsupportedEncodingError

from .cid import SHA2_256_NAME, CODEC_CODES, Multicodec, derive_from_reserve, encode_cid

logger = logging.getLogger(__name__)

ARC3_NAME = "arc3"
ARC3_NAME_SUFFIX = "@arc3"
ARC3_URL_SUFFIX = "#arc3"

TEMPLATE_SCHEME = "template-ipfs"
TEMPLATE_CID_MARKER = "{ipfscid"
TEMPLATE_PREFIX = f"{TEMPLATE_SCHEME}://{TEMPLATE_CID_MARKER}"
RESERVE_FIELD = "reserve"

IPFS_SCHEME = "ipfs"
HTTPS_SCHEME = "https"

DEFAULT_IPFS_GATEWAY = "https://ipfs.io"


@dataclass(frozen=True)
class IPFSGateway:
    """IPFS HTTP gateway used to turn CIDs into fetchable URLs."""

    url: str = DEFAULT_IPFS_GATEWAY

    def construct_url(self, cid: str, path: str = "") -> str:
        """Construct full URL for content."""
        base_url = self.url.rstrip('/')
        if not base_url.endswith('/ipfs'):
            base_url += '/ipfs'

        full_path = f"{base_url}/{cid}"
        if path:
            full_path += f"/{path.lstrip('/')}"

        return full_path

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url}


DEFAULT_GATEWAY = IPFSGateway()


@dataclass(frozen=True)
class TemplateCID:
    """Parsed ``{ipfscid:<version>:<codec>:<field>:<hash>}`` template."""

    version: int
    codec: str
    field: str
    hash_algorithm: str

    @property
    def codec_code(self) -> int:
        return CODEC_CODES[self.codec]


def parse_template_cid(template: str) -> TemplateCID:
    """
    Parse and validate the ``{ipfscid:...}`` part of an ARC19 URL.

    Args:
        template: Template text, e.g. ``{ipfscid:1:raw:reserve:sha2-256}``

    Returns:
        Validated TemplateCID

    Raises:
        UnsupportedEncodingError: Naming the first component that is not supported
    """
    components = template.split(":")
    if len(components) != 5:
        raise UnsupportedEncodingError(f"unknown ipfscid format: {template}")

    marker, version_text, codec, field, hash_algorithm = components
    hash_algorithm = hash_algorithm.split("}")[0]

    if marker != TEMPLATE_CID_MARKER:
        raise UnsupportedEncodingError(f"unknown ipfscid marker: {marker}")
    if hash_algorithm != SHA2_256_NAME:
        raise UnsupportedEncodingError(f"unsupported hash: {hash_algorithm}")
    if codec not in CODEC_CODES:
        raise UnsupportedEncodingError(f"unsupported codec: {codec}")
    if field != RESERVE_FIELD:
        raise UnsupportedEncodingError(f"unsupported asa field: {field}")

    try:
        version = int(version_text)
    except ValueError:
        raise UnsupportedEncodingError(f"unsupported cid version: {version_text}") from None
    if version not in (0, 1):
        raise UnsupportedEncodingError(f"unsupported cid version: {version}")
    if version == 0 and CODEC_CODES[codec] != Multicodec.DAG_PB:
        raise UnsupportedEncodingError(f"unsupported codec for cid version 0: {codec}")

    return TemplateCID(version=version, codec=codec, field=field, hash_algorithm=hash_algorithm)


def strip_arc3_suffix(url: str) -> str:
    if url.endswith(ARC3_URL_SUFFIX):
        return url[:-len(ARC3_URL_SUFFIX)]
    return url


def resolve_protocol(url: str, reserve_address: Optional[str],
                     gateway: Optional[IPFSGateway] = None) -> str:
    """
    Resolve a stored asset URL to a fetchable address.

    Unsupported templates are not an error: the reason is logged and the
    original URL comes back unchanged.

    Args:
        url: Stored asset URL (literal or ARC19 template)
        reserve_address: Asset reserve address, needed only for templates
        gateway: IPFS gateway for ``ipfs://`` addresses

    Returns:
        Resolved URL

    Raises:
        MalformedAddressError: If a template's reserve address does not decode
    """
    gateway = gateway or DEFAULT_GATEWAY
    original_url = url
    url = strip_arc3_suffix(url)

    scheme, separator, remainder = url.partition("://")
    if not separator:
        return url

    if scheme == TEMPLATE_SCHEME and remainder.startswith(TEMPLATE_CID_MARKER):
        template, _, path = remainder.partition("/")
        try:
            template_cid = parse_template_cid(template)
        except UnsupportedEncodingError as e:
            logger.warning(f"Cannot resolve template URL {original_url}: {e}")
            return original_url

        if not reserve_address:
            logger.warning(f"Cannot resolve template URL {original_url}: no reserve address")
            return original_url

        content_address = derive_from_reserve(
            reserve_address, template_cid.codec_code, template_cid.version
        )
        scheme = IPFS_SCHEME
        remainder = encode_cid(content_address)
        if path:
            remainder += f"/{path}"

    if scheme == IPFS_SCHEME:
        cid, _, path = remainder.partition("/")
        return gateway.construct_url(cid, path)

    # https is already fetchable; other schemes are passed through untouched
    return url


def convert_potential_ipfs_to_https(url: Optional[str],
                                    gateway: Optional[IPFSGateway] = None) -> Optional[str]:
    """Map ``ipfs://`` to the gateway, keep ``https://``, drop anything else."""
    if not url:
        return None

    gateway = gateway or DEFAULT_GATEWAY
    if url.startswith(f"{IPFS_SCHEME}://"):
        cid, _, path = url[len(IPFS_SCHEME) + 3:].partition("/")
        return gateway.construct_url(cid, path)
    if url.startswith(f"{HTTPS_SCHEME}://"):
        return url

    return None


def build_arc19_template_url(version: int, codec: str) -> str:
    """Template URL an ARC19 creator stores alongside the reserve address."""
    if codec not in CODEC_CODES:
        raise UnsupportedEncodingError(f"unsupported codec: {codec}")
    return f"{TEMPLATE_PREFIX}:{version}:{codec}:{RESERVE_FIELD}:{SHA2_256_NAME}}}"


def build_arc3_url(cid: str) -> str:
    """ARC3 asset URL for a pinned metadata document."""
    return f"{IPFS_SCHEME}://{cid}{ARC3_URL_SUFFIX}"
