# cauldron_indexer/core/config.py

import os
from pathlib import Path
from typing import Dict, Optional

import msgspec
import yaml
from msgspec import Struct

from .errors import ConfigurationError
from .logging import IndexerLogger, log_with_context, INFO
from .networks import NETWORKS, NetworkConfig

DEFAULT_DB_URL = "sqlite:///cauldron_indexer.db"
DEFAULT_BATCH_SIZE = 2000


class DatabaseConfig(Struct):
    url: str
    pool_size: int = 5
    max_overflow: int = 10


class RpcConfig(Struct):
    endpoint_url: str
    timeout: int = 30


class IndexerConfig(Struct, kw_only=True):
    network: NetworkConfig
    database: DatabaseConfig
    rpc: Optional[RpcConfig] = None
    batch_size: int = DEFAULT_BATCH_SIZE

    @classmethod
    def from_env(cls, network_name: Optional[str] = None, env_vars: dict = None,
                 **overrides) -> 'IndexerConfig':
        logger = IndexerLogger.get_logger('core.config')

        from dotenv import load_dotenv
        load_dotenv()
        env = env_vars if env_vars is not None else os.environ

        network_name = network_name or env.get("CAULDRON_NETWORK")
        if not network_name:
            raise ConfigurationError("Must provide a network or set CAULDRON_NETWORK")

        networks = load_networks(env.get("CAULDRON_NETWORKS_FILE"))
        network = networks.get(network_name)
        if network is None:
            raise ConfigurationError(
                f"Unknown network '{network_name}', expected one of {sorted(networks)}"
            )

        database = DatabaseConfig(url=env.get("CAULDRON_DB_URL", DEFAULT_DB_URL))
        rpc = cls._create_rpc_config(network_name, env)
        batch_size = int(env.get("CAULDRON_BATCH_SIZE", DEFAULT_BATCH_SIZE))

        config = cls(
            network=network,
            database=database,
            rpc=rpc,
            batch_size=batch_size,
        )
        if overrides:
            config = msgspec.structs.replace(config, **overrides)

        log_with_context(logger, INFO, "Configuration loaded",
                        network=network.name,
                        factory_count=len(network.factories),
                        has_rpc=config.rpc is not None,
                        batch_size=config.batch_size)
        return config

    @staticmethod
    def _create_rpc_config(network_name: str, env) -> Optional[RpcConfig]:
        endpoint = env.get(f"CAULDRON_{network_name.upper()}_RPC_URL") or env.get("CAULDRON_RPC_URL")
        if not endpoint:
            return None
        return RpcConfig(
            endpoint_url=endpoint,
            timeout=int(env.get("CAULDRON_RPC_TIMEOUT", 30)),
        )

    def require_rpc(self) -> RpcConfig:
        if self.rpc is None:
            raise ConfigurationError(
                f"No RPC endpoint configured; set CAULDRON_{self.network.name.upper()}_RPC_URL "
                "or CAULDRON_RPC_URL"
            )
        return self.rpc


def load_networks(networks_file: Optional[str] = None) -> Dict[str, NetworkConfig]:
    """Built-in network tables, updated with entries from an optional YAML file"""
    networks = dict(NETWORKS)
    if not networks_file:
        return networks

    path = Path(networks_file)
    if not path.exists():
        raise ConfigurationError(f"Networks file not found: {networks_file}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("networks", data)
    if not isinstance(entries, dict):
        raise ConfigurationError(f"Networks file must map network names to settings: {networks_file}")

    for name, settings in entries.items():
        settings = dict(settings or {})
        settings.setdefault("name", name)
        try:
            networks[name] = msgspec.convert(settings, NetworkConfig)
        except msgspec.ValidationError as e:
            raise ConfigurationError(f"Invalid network '{name}' in {networks_file}: {e}") from e

    return networks
