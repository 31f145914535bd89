"""
NIP13 - CLI Configuration

Hierarchical configuration loading for the command line: built-in
defaults, then one YAML or JSON file, then ``NIP13_`` environment
variables. The merged result builds the network configuration and the
transaction parameters used by the standard.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ledger.network import NetworkType
from models.network import DEFAULT_EPOCH_ADJUSTMENT, NetworkConfig, TransactionParameters


# Configuration file locations in order of precedence (highest to lowest)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / '.nip13.yml',
    Path.cwd() / '.nip13.json',
    Path.home() / '.nip13' / 'config.yml',
    Path.home() / '.nip13' / 'config.json',
]

ENV_PREFIX = 'NIP13_'

# Environment variable -> dotted configuration path
ENV_MAPPING = {
    'NIP13_NETWORK_TYPE': 'network.type',
    'NIP13_GENERATION_HASH': 'network.generation_hash',
    'NIP13_EPOCH_ADJUSTMENT': 'network.epoch_adjustment',
    'NIP13_NODE_URL': 'network.node_url',
    'NIP13_DEADLINE_HOURS': 'transaction.deadline_hours',
    'NIP13_MAX_FEE': 'transaction.max_fee',
    'NIP13_FEE_MULTIPLIER': 'transaction.fee_multiplier',
    'NIP13_MNEMONIC': 'accounts.mnemonic',
    'NIP13_PASSPHRASE': 'accounts.passphrase',
}

# Settings converted to int when read from the environment; all others stay strings
NUMERIC_SETTINGS = {
    'network.epoch_adjustment',
    'transaction.deadline_hours',
    'transaction.max_fee',
    'transaction.fee_multiplier',
}

DEFAULT_CONFIG = {
    'network': {
        'type': 'TEST_NET',
        'generation_hash': None,
        'epoch_adjustment': DEFAULT_EPOCH_ADJUSTMENT,
        'node_url': None,
    },
    'transaction': {
        'deadline_hours': 2,
        'max_fee': 0,
        'fee_multiplier': 100,
    },
    'accounts': {
        'mnemonic': None,
        'passphrase': '',
    },
}


class ConfigurationError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""
    pass


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            environ: Environment mapping, defaults to os.environ
        """
        self.logger = logging.getLogger(__name__)
        self.config_file = config_file
        self.environ = os.environ if environ is None else environ
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

        configs = [DEFAULT_CONFIG]
        self._config_sources.append("defaults")

        if self.config_file:
            path = Path(self.config_file)
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}")
            configs.append(self._load_config_file(path))
            self._config_sources.append(f"file:{path}")
        else:
            for path in CONFIG_SEARCH_PATHS:
                if path.exists():
                    configs.append(self._load_config_file(path))
                    self._config_sources.append(f"file:{path}")
                    self.logger.debug(f"Loaded config from {path}")
                    break

        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        self._config_cache = self._deep_merge(*configs)
        return self._config_cache

    @property
    def sources(self):
        return list(self._config_sources)

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        try:
            with open(path, 'r') as f:
                if path.suffix in ['.yml', '.yaml']:
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unknown config file format: {path}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config from {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from NIP13_ environment variables."""
        env_config = {}

        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX) or key not in ENV_MAPPING:
                continue

            setting = ENV_MAPPING[key]
            parts = setting.split('.')
            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_env_value(setting, value)

        return env_config

    def _parse_env_value(self, setting: str, value: str) -> Union[str, int]:
        """Parse an environment variable value, keeping non-numeric settings verbatim."""
        if setting not in NUMERIC_SETTINGS:
            return value
        try:
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
                    result[key] = value

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'network.node_url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self.load()

        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def network_config(self) -> NetworkConfig:
        """
        Build the network configuration.

        Raises:
            ConfigurationError: If a value is missing or invalid
        """
        network_type = str(self.get('network.type', 'TEST_NET')).upper()
        if network_type not in NetworkType.__members__:
            raise ConfigurationError(f"Unknown network type: {network_type}")

        generation_hash = self.get('network.generation_hash')
        if not generation_hash:
            raise ConfigurationError("network.generation_hash is required")

        try:
            return NetworkConfig(
                network_type=NetworkType[network_type],
                generation_hash=str(generation_hash),
                epoch_adjustment=self.get('network.epoch_adjustment', DEFAULT_EPOCH_ADJUSTMENT),
                node_url=self.get('network.node_url'),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid network configuration: {e}")

    def transaction_parameters(self) -> TransactionParameters:
        """
        Build the transaction parameters.

        Raises:
            ConfigurationError: If a value is invalid
        """
        try:
            return TransactionParameters(**self.get('transaction', {}))
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid transaction parameters: {e}")
