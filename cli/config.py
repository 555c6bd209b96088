"""
Configuration Management Module for the arcnft CLI

Handles hierarchical configuration loading, environment variable mapping,
validation, and conversion of settings into resolver collaborators.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, List, Union

import yaml

from network.http import HTTPConfig
from network.ledger import DEFAULT_ENDPOINTS, LedgerConfig, Network, NetworkEndpoints
from nft.template import DEFAULT_IPFS_GATEWAY, IPFSGateway

# Configuration file locations in order of precedence (highest to lowest)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / '.arcnft.yml',
    Path.cwd() / '.arcnft.json',
    Path.home() / '.arcnft' / 'config.yml',
    Path.home() / '.arcnft' / 'config.json',
]

# Environment variable prefix
ENV_PREFIX = 'ARCNFT_'

NETWORK_TYPES = [network.value for network in Network]
OUTPUT_FORMATS = ['table', 'json', 'yaml']

# Default configuration values
DEFAULT_CONFIG = {
    'network': {
        'type': Network.MAINNET.value,
        # Empty means the public endpoint for the selected network
        'algod_url': '',
        'indexer_url': '',
    },
    'ipfs': {
        'gateway': DEFAULT_IPFS_GATEWAY,
    },
    'http': {
        'timeout': 30,
        'user_agent': 'arcnft-resolver/1.0',
    },
    'cli': {
        'output_format': 'table',
    },
}

# Configuration profiles
PROFILES = {
    'mainnet': {
        'network': {'type': Network.MAINNET.value},
    },
    'testnet': {
        'network': {'type': Network.TESTNET.value},
    },
}


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            profile: Configuration profile to load (mainnet, testnet)
        """
        self.logger = logging.getLogger('arcnft-cli.config')
        self.config_file = config_file
        self.profile = profile
        self._config_cache = None
        self._config_sources = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from all sources in hierarchical order.

        Returns:
            Merged configuration dictionary
        """
        if self._config_cache is not None:
            return self._config_cache

        self._config_sources = []
        configs = [copy.deepcopy(DEFAULT_CONFIG)]
        self._config_sources.append("defaults")

        if self.profile:
            if self.profile not in PROFILES:
                raise ValueError(f"Unknown profile: {self.profile}")
            configs.append(PROFILES[self.profile])
            self._config_sources.append(f"profile:{self.profile}")
            self.logger.debug(f"Applied profile: {self.profile}")

        if self.config_file:
            config_path = Path(self.config_file)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            configs.append(self._load_config_file(config_path))
            self._config_sources.append(f"file:{config_path}")
        else:
            for config_path in CONFIG_SEARCH_PATHS:
                if config_path.exists():
                    configs.append(self._load_config_file(config_path))
                    self._config_sources.append(f"file:{config_path}")
                    self.logger.debug(f"Loaded config from {config_path}")
                    break  # Use first found config file

        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        # Later sources override earlier ones
        self._config_cache = self._deep_merge(*configs)
        return self._config_cache

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        with open(path, 'r') as f:
            try:
                if path.suffix in ['.yml', '.yaml']:
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise ValueError(f"Unknown config file format: {path}")
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        The first underscore after the prefix separates section from key, so
        ARCNFT_NETWORK_INDEXER_URL -> {'network': {'indexer_url': value}}.
        """
        env_config = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            section, _, option = key[len(ENV_PREFIX):].lower().partition('_')
            if not option:
                continue
            env_config.setdefault(section, {})[option] = self._parse_env_value(value)

        return env_config

    def _parse_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Parse environment variable value to appropriate type."""
        # JSON first, for lists and mappings
        try:
            return json.loads(value)
        except ValueError:
            pass

        if value.lower() in ['true', 'yes']:
            return True
        elif value.lower() in ['false', 'no']:
            return False

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def _deep_merge(self, *dicts: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple dictionaries."""
        result = {}

        for dictionary in dicts:
            for key, value in dictionary.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = copy.deepcopy(value)

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'ipfs.gateway')
            default: Default value if key not found
        """
        current = self.load()

        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key_path: str, value: Any):
        """Set configuration value by dot-notation path."""
        config = self.load()

        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})

        current[keys[-1]] = value

    def save(self, path: Optional[str] = None, format: str = 'yaml'):
        """
        Save current configuration to file.

        Args:
            path: File path to save to (default: project config file)
            format: Output format ('yaml' or 'json')
        """
        config = self.load()

        if not path:
            path = Path.cwd() / ('.arcnft.yml' if format == 'yaml' else '.arcnft.json')

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            if format == 'yaml':
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config, f, indent=2)

        self.logger.info(f"Configuration saved to {path}")

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        config = self.load()
        errors = []

        network_type = config.get('network', {}).get('type')
        if network_type not in NETWORK_TYPES:
            errors.append(f"Invalid network type: {network_type}")

        for key in ('algod_url', 'indexer_url'):
            url = config.get('network', {}).get(key)
            if url and not str(url).startswith(('http://', 'https://')):
                errors.append(f"network.{key} must be an http(s) URL: {url}")

        gateway = config.get('ipfs', {}).get('gateway')
        if not gateway or not str(gateway).startswith(('http://', 'https://')):
            errors.append(f"ipfs.gateway must be an http(s) URL: {gateway}")

        timeout = config.get('http', {}).get('timeout')
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            errors.append("http.timeout must be a positive number")

        output_format = config.get('cli', {}).get('output_format')
        if output_format not in OUTPUT_FORMATS:
            errors.append(f"Invalid output format: {output_format}")

        return errors

    def get_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded."""
        self.load()
        return self._config_sources

    def get_network(self) -> Network:
        return Network(self.get('network.type', Network.MAINNET.value))

    def get_gateway(self, override: Optional[str] = None) -> IPFSGateway:
        return IPFSGateway(override or self.get('ipfs.gateway', DEFAULT_IPFS_GATEWAY))

    def get_http_config(self) -> HTTPConfig:
        return HTTPConfig(
            timeout=float(self.get('http.timeout', 30)),
            user_agent=self.get('http.user_agent', 'arcnft-resolver/1.0'),
        )

    def get_ledger_config(self, network: Optional[Network] = None) -> LedgerConfig:
        """Ledger config with configured endpoints overriding the public ones."""
        network = Network(network or self.get_network())
        endpoints = dict(DEFAULT_ENDPOINTS)
        defaults = endpoints[network]
        endpoints[network] = NetworkEndpoints(
            algod_url=self.get('network.algod_url') or defaults.algod_url,
            indexer_url=self.get('network.indexer_url') or defaults.indexer_url,
        )
        return LedgerConfig(network=network, endpoints=endpoints)

    def reset(self):
        """Reset configuration cache."""
        self._config_cache = None
        self._config_sources = []


def load_config(config_file: Optional[str] = None,
                profile: Optional[str] = None) -> Dict[str, Any]:
    """Convenience function to load configuration."""
    return ConfigurationManager(config_file, profile).load()
