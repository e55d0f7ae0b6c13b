"""Configuration schema using Pydantic.

Single data model and defaults for the client, persisted to
~/.demiurge-studio/config.json. Environment variables (DEMIURGE_*) take
precedence over values read from the file.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_RPC_URL = "http://127.0.0.1:8545/rpc"


class RpcClientConfig(BaseModel):
    """Settings handed to a JsonRpcClient at construction."""
    endpoint_url: str = DEFAULT_RPC_URL
    timeout_seconds: float | None = None  # None: keep the HTTP library default


class Config(BaseSettings):
    """Root configuration for demiurge-studio."""
    rpc_url: str = DEFAULT_RPC_URL
    timeout_seconds: float | None = None
    log_level: str = "INFO"
    log_to_file: bool = False
    addresses: list[str] = Field(default_factory=list)  # default addresses for `status`

    def client_config(self) -> RpcClientConfig:
        """Build the explicit client settings from this config."""
        return RpcClientConfig(endpoint_url=self.rpc_url, timeout_seconds=self.timeout_seconds)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; the environment wins over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    model_config = ConfigDict(
        env_prefix="DEMIURGE_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
    )
