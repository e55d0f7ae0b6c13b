"""Configuration module for demiurge-studio."""

from demiurge_studio.config.loader import apply_overrides, get_config_path, load_config, save_config
from demiurge_studio.config.schema import DEFAULT_RPC_URL, Config, RpcClientConfig

__all__ = [
    "Config",
    "RpcClientConfig",
    "DEFAULT_RPC_URL",
    "load_config",
    "save_config",
    "apply_overrides",
    "get_config_path",
]
