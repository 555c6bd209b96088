#!/usr/bin/env python3
"""
Asset Commands for the arcnft CLI

Commands that resolve an asset's metadata from the ledger and classify asset
parameters against the ARC conventions without any network access.
"""

import asyncio
from typing import Optional

import click

from cli.main import pass_context, CLIContext, handle_cli_error
from network.http import HTTPClient
from network.ledger import AlgorandLedgerClient, Network
from nft.assets import AssetMetadataService
from nft.standards import classify_asset, is_arc69_candidate
from nft.template import resolve_protocol


@click.group()
@pass_context
def asset(ctx: CLIContext):
    """
    Asset metadata commands.

    Resolve and classify ARC3, ARC19 and ARC69 assets.
    """
    ctx.logger.debug("Asset command group invoked")


@asset.command('metadata')
@click.argument('asset_id', type=int)
@click.option('--network', type=click.Choice([n.value for n in Network]),
              help='Network to query (default from configuration)')
@click.option('--gateway', help='IPFS gateway base URL (default from configuration)')
@pass_context
@handle_cli_error
def metadata(ctx: CLIContext, asset_id: int, network: Optional[str], gateway: Optional[str]):
    """
    Resolve all metadata for an asset.

    Examples:
        arcnft asset metadata 1234567
        arcnft asset metadata 1234567 --network testnet --gateway https://gateway.pinata.cloud
    """
    config = ctx.config_manager
    selected = Network(network) if network else config.get_network()

    with HTTPClient(config.get_http_config()) as http:
        ledger = AlgorandLedgerClient(http, config.get_ledger_config(selected))
        service = AssetMetadataService(ledger, http, gateway=config.get_gateway(gateway))
        nft_asset = asyncio.run(service.get_asset_metadata(asset_id, selected))

    ctx.logger.info(f"Resolved asset {asset_id} on {selected.value}")
    ctx.output(nft_asset.to_dict())


@asset.command('classify')
@click.option('--name', default='', help='Asset name')
@click.option('--url', required=True, help='Asset URL as stored on chain')
@click.option('--reserve', help='Asset reserve address')
@pass_context
@handle_cli_error
def classify(ctx: CLIContext, name: str, url: str, reserve: Optional[str]):
    """
    Classify asset parameters without querying the ledger.

    ARC69 can only be confirmed from the asset's configuration notes, so it
    is reported as a candidate.

    Examples:
        arcnft asset classify --name "Cat@arc3" --url "ipfs://bafy...#arc3"
    """
    params = {'name': name, 'url': url}
    if reserve:
        params['reserve'] = reserve
    asset_info = {'params': params}

    result = {
        'standards': [standard.value for standard in classify_asset(asset_info)],
        'arc69_candidate': is_arc69_candidate(asset_info),
        'resolved_url': resolve_protocol(url, reserve, ctx.config_manager.get_gateway()),
    }
    ctx.output(result)
