#!/usr/bin/env python3
"""
Metadata Commands for the arcnft CLI

Offline checks for metadata documents.
"""

import click

from cli.main import pass_context, CLIContext, handle_cli_error, load_json_file
from nft.metadata import validate_arc69_metadata


@click.group()
@pass_context
def metadata(ctx: CLIContext):
    """Metadata document commands."""
    ctx.logger.debug("Metadata command group invoked")


@metadata.command('validate-arc69')
@click.argument('file_path', metavar='FILE', type=click.Path(exists=True, dir_okay=False))
@pass_context
@handle_cli_error
def validate_arc69(ctx: CLIContext, file_path: str):
    """
    Validate an ARC69 JSON document.

    Exits with status 1 when the document does not match the schema.

    Examples:
        arcnft metadata validate-arc69 note.json
    """
    result = validate_arc69_metadata(load_json_file(file_path))
    ctx.output(result.to_dict())

    if not result.is_valid:
        ctx.logger.info(f"{file_path} is not valid ARC69 metadata")
        raise click.exceptions.Exit(1)
