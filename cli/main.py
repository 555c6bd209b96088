#!/usr/bin/env python3
"""
ARC NFT Metadata Resolver - Command Line Interface

A CLI for resolving Algorand NFT metadata, inspecting content identifiers and
reserve addresses, and validating ARC69 documents.
"""

import sys
import json
import logging
import traceback
from functools import wraps
from pathlib import Path
from typing import Optional, Any

import click

from cli import __version__
from cli.config import ConfigurationManager, PROFILES
from cli.output import OutputFormatter, OUTPUT_FORMATS

# CLI logger plus the library packages it drives
LOGGER_NAMES = ('arcnft-cli', 'nft', 'network', 'crypto')


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.output_format: Optional[str] = None
        self.verbose: int = 0
        self.config_manager: Optional[ConfigurationManager] = None
        self.logger: logging.Logger = logging.getLogger('arcnft-cli')

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }

        level = log_levels.get(min(self.verbose, 2), logging.DEBUG)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        for name in LOGGER_NAMES:
            logger = logging.getLogger(name)
            logger.handlers = [handler]
            logger.setLevel(level)

        # Suppress verbose third-party logs unless in debug mode
        if self.verbose < 2:
            logging.getLogger('requests').setLevel(logging.WARNING)
            logging.getLogger('urllib3').setLevel(logging.WARNING)

    def load_config(self):
        """Create the configuration manager for this invocation."""
        self.config_manager = ConfigurationManager(self.config_file, self.profile)
        self.config_manager.load()
        self.logger.debug(f"Configuration sources: {', '.join(self.config_manager.get_sources())}")

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value with fallback to default."""
        if self.config_manager is None:
            return default
        return self.config_manager.get(key, default)

    def output(self, data: Any, format_override: Optional[str] = None):
        """Output data in the selected format."""
        format_type = format_override or self.output_format or self.get_config('cli.output_format', 'table')
        if format_type not in OUTPUT_FORMATS:
            format_type = 'table'
        click.echo(OutputFormatter(format_type).format(data))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Decorator to report command errors as ``Error: <message>`` with exit status 1."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("\nOperation cancelled by user.", err=True)
            sys.exit(130)
        except (click.exceptions.Exit, click.ClickException, click.Abort):
            raise
        except Exception as e:
            ctx = click.get_current_context(silent=True)
            cli_ctx = ctx.find_object(CLIContext) if ctx else None

            click.echo(f"Error: {e}", err=True)
            if cli_ctx and cli_ctx.verbose >= 2:
                click.echo(traceback.format_exc(), err=True)
            else:
                click.echo("Use -vv for detailed error information.", err=True)

            sys.exit(1)

    return wrapper


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              help='Path to configuration file')
@click.option('--output-format', '-o',
              type=click.Choice(OUTPUT_FORMATS),
              help='Output format (default from configuration)')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.option('--profile',
              type=click.Choice(sorted(PROFILES)),
              help='Configuration profile')
@click.version_option(__version__, '--version', message='arcnft v%(version)s')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], output_format: Optional[str],
        verbose: int, profile: Optional[str]):
    """
    ARC NFT Metadata Resolver

    Resolve ARC3, ARC19 and ARC69 metadata for Algorand assets.

    Examples:
        arcnft asset metadata 1234567
        arcnft cid from-reserve <RESERVE_ADDRESS> --codec raw
        arcnft cid template --url "template-ipfs://{ipfscid:1:raw:reserve:sha2-256}" --reserve <ADDR>
        arcnft metadata validate-arc69 note.json
    """
    ctx.config_file = config_file
    ctx.profile = profile
    ctx.output_format = output_format
    ctx.verbose = verbose

    ctx.setup_logging()

    try:
        ctx.load_config()
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Failed to load configuration: {e}")

    ctx.logger.debug("CLI initialized with context")


def load_json_file(file_path: str) -> Any:
    """Load a JSON document from disk."""
    path = Path(file_path)
    if not path.exists():
        raise click.FileError(file_path, hint="File not found")

    try:
        with open(path, 'r') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.FileError(file_path, hint=f"Invalid JSON: {e}")


def register_commands():
    """Register all command modules with the main CLI."""
    from cli.commands.asset import asset
    from cli.commands.cid import cid
    from cli.commands.config import config
    from cli.commands.metadata import metadata

    for command in (asset, cid, config, metadata):
        cli.add_command(command)


def main():
    """Console script entry point."""
    register_commands()
    cli()


if __name__ == '__main__':
    main()
