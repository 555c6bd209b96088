#!/usr/bin/env python3
"""
Content Identifier Commands for the arcnft CLI

Commands for decoding CIDs and converting between CIDs, ARC19 reserve
addresses and template URLs.
"""

from typing import Optional

import click

from cli.main import pass_context, CLIContext, handle_cli_error
from nft.cid import (
    CODEC_CODES,
    decode_cid,
    derive_from_reserve,
    derive_ipfs_hash_properties,
)
from nft.template import build_arc19_template_url, resolve_protocol


@click.group()
@pass_context
def cid(ctx: CLIContext):
    """
    Content identifier commands.

    Decode CIDs and map them to and from ARC19 reserve addresses.
    """
    ctx.logger.debug("CID command group invoked")


@cid.command('decode')
@click.argument('cid_text', metavar='CID')
@pass_context
@handle_cli_error
def decode(ctx: CLIContext, cid_text: str):
    """Show the version, codec and digest of a CID."""
    ctx.output(decode_cid(cid_text).to_dict())


@cid.command('from-reserve')
@click.argument('address')
@click.option('--codec', type=click.Choice(sorted(CODEC_CODES)), default='raw',
              show_default=True, help='Multicodec of the content')
@click.option('--version', 'cid_version', type=click.IntRange(0, 1), default=1,
              show_default=True, help='CID version')
@pass_context
@handle_cli_error
def from_reserve(ctx: CLIContext, address: str, codec: str, cid_version: int):
    """
    Build the CID an ARC19 reserve address points at.

    Examples:
        arcnft cid from-reserve <RESERVE_ADDRESS> --codec dag-pb --version 0
    """
    content_address = derive_from_reserve(address, CODEC_CODES[codec], cid_version)
    ctx.output(content_address.to_dict())


@cid.command('to-reserve')
@click.argument('cid_text', metavar='CID')
@pass_context
@handle_cli_error
def to_reserve(ctx: CLIContext, cid_text: str):
    """
    Derive the reserve address and template URL for a pinned CID.

    Examples:
        arcnft cid to-reserve bafkrei...
    """
    properties = derive_ipfs_hash_properties(cid_text)
    result = properties.to_dict()
    if properties.codec:
        result['template_url'] = build_arc19_template_url(properties.version, properties.codec)
    ctx.output(result)


@cid.command('template')
@click.option('--url', required=True, help='Template URL, e.g. template-ipfs://{ipfscid:1:raw:reserve:sha2-256}')
@click.option('--reserve', required=True, help='Asset reserve address')
@click.option('--gateway', help='IPFS gateway base URL (default from configuration)')
@pass_context
@handle_cli_error
def template(ctx: CLIContext, url: str, reserve: str, gateway: Optional[str]):
    """Resolve an ARC19 template URL to an HTTPS gateway URL."""
    resolved = resolve_protocol(url, reserve, ctx.config_manager.get_gateway(gateway))
    ctx.output({'url': url, 'resolved_url': resolved})
