"""
arcnft CLI Commands Package

Command modules for the ARC NFT Metadata Resolver CLI.
"""

__all__ = ['asset', 'cid', 'config', 'metadata']
