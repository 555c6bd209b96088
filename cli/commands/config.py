#!/usr/bin/env python3
"""
Configuration Commands for the arcnft CLI

Commands for inspecting and validating the merged CLI configuration.
"""

import click

from cli.main import pass_context, CLIContext, handle_cli_error


@click.group()
@pass_context
def config(ctx: CLIContext):
    """
    Configuration management commands.

    Show, query and validate configuration from defaults, profiles, files
    and ARCNFT_* environment variables.
    """
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@pass_context
@handle_cli_error
def show(ctx: CLIContext):
    """Show the merged configuration."""
    ctx.output(ctx.config_manager.load())


@config.command('get')
@click.argument('key')
@pass_context
@handle_cli_error
def get(ctx: CLIContext, key: str):
    """
    Show one configuration value by dotted path.

    Examples:
        arcnft config get ipfs.gateway
    """
    value = ctx.config_manager.get(key)
    if value is None:
        raise click.ClickException(f"Configuration key not found: {key}")
    ctx.output({key: value})


@config.command('validate')
@pass_context
@handle_cli_error
def validate(ctx: CLIContext):
    """Validate the merged configuration."""
    errors = ctx.config_manager.validate()
    if errors:
        for error in errors:
            click.echo(f"  - {error}", err=True)
        raise click.ClickException(f"Configuration has {len(errors)} error(s)")

    click.echo("Configuration is valid.")


@config.command('sources')
@pass_context
@handle_cli_error
def sources(ctx: CLIContext):
    """List configuration sources in the order they were applied."""
    ctx.output([{'order': index, 'source': source}
                for index, source in enumerate(ctx.config_manager.get_sources(), start=1)])
