"""
ARC NFT Metadata Resolver - Metadata Exceptions

This module defines custom exceptions for metadata classification and resolution.
"""


class MetadataError(Exception):
    """Base exception for metadata resolution errors."""
    pass


class MissingAssetParamsError(MetadataError):
    """Raised when asset info is missing or carries no params."""

    def __init__(self, message: str = "Missing params field."):
        super().__init__(message)


class MetadataParseError(MetadataError):
    """Raised when a fetched metadata document is not valid JSON."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid metadata JSON at {url}: {reason}")
