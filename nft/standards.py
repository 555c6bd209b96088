"""
ARC NFT Metadata Resolver - Standard Classification

Static checks that decide which ARC metadata conventions an asset's stored
name and URL are compatible with. Nothing here performs I/O; ARC69 can only
be confirmed by reading the asset's configuration history.
"""

from enum import Enum
from typing import Dict, Any, List, Optional

from .template import (
    ARC3_NAME,
    ARC3_NAME_SUFFIX,
    ARC3_URL_SUFFIX,
    TEMPLATE_PREFIX,
    RESERVE_FIELD,
)


class ARCStandard(str, Enum):
    """ARC metadata conventions."""
    ARC3 = "ARC3"
    ARC19 = "ARC19"
    ARC69 = "ARC69"
    CUSTOM = "CUSTOM"


def get_asset_params(asset_info: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not asset_info:
        return None
    return asset_info.get("params") or None


def is_arc3_asset(asset_info: Optional[Dict[str, Any]]) -> bool:
    """ARC3 by asset name (``arc3`` or ``...@arc3``) or by a ``#arc3`` URL suffix."""
    params = get_asset_params(asset_info)
    if not params:
        return False

    asset_name = params.get("name") or ""
    asset_url = params.get("url") or ""

    is_arc3_by_name = asset_name == ARC3_NAME or asset_name.endswith(ARC3_NAME_SUFFIX)
    is_arc3_by_url = asset_url.endswith(ARC3_URL_SUFFIX)

    return is_arc3_by_name or is_arc3_by_url


def is_arc19_asset(asset_info: Optional[Dict[str, Any]]) -> bool:
    """ARC19 when the URL is an ``ipfscid`` template that references the reserve."""
    params = get_asset_params(asset_info)
    if not params:
        return False

    asset_url = params.get("url") or ""
    return asset_url.startswith(TEMPLATE_PREFIX) and RESERVE_FIELD in asset_url


def is_arc69_candidate(asset_info: Optional[Dict[str, Any]]) -> bool:
    """
    Heuristic only: an ``ipfs://`` or ``https://`` URL that is neither ARC3
    nor ARC19. An ARC69 asset is confirmed by its configuration notes.
    """
    params = get_asset_params(asset_info)
    if not params:
        return False

    asset_url = params.get("url") or ""
    return (asset_url.startswith(("ipfs://", "https://"))
            and not is_arc3_asset(asset_info)
            and not is_arc19_asset(asset_info))


def classify_asset(asset_info: Optional[Dict[str, Any]]) -> List[ARCStandard]:
    """Return the statically detectable standards, ARC3 before ARC19."""
    standards = []
    if is_arc3_asset(asset_info):
        standards.append(ARCStandard.ARC3)
    if is_arc19_asset(asset_info):
        standards.append(ARCStandard.ARC19)
    return standards


def get_type_from_mime_type(mime_type: str) -> str:
    """Top-level media type, e.g. ``image`` for ``image/png``."""
    return mime_type.split("/")[0]
