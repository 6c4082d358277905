from pydantic import BaseModel, Field, IPvAnyAddress
from pydantic_settings import BaseSettings, SettingsConfigDict
from ipaddress import ip_address

DEFAULT_API_KEY = "mcpanel-dev-key"


class WebServerConfigSchema(BaseSettings):
    ip: IPvAnyAddress = ip_address("0.0.0.0")
    port: int = Field(default=3001, ge=0, le=65535)
    api_key: str = Field(default=DEFAULT_API_KEY, min_length=1)
    cors_origin: str = Field(default="*", min_length=1)

    model_config = SettingsConfigDict(env_prefix="MCPANEL_WEB_")


class ContainersConfigSchema(BaseSettings):
    default_type: str = Field(default="paper", min_length=1)
    default_version: str = Field(default="1.21.1", min_length=1)
    default_port: int = Field(default=25565, ge=1, le=65535)
    default_ram_mb: int = Field(default=2048, gt=0)
    default_max_players: int = Field(default=20, gt=0)
    start_delay: float = Field(default=3.0, ge=0)
    stop_delay: float = Field(default=2.0, ge=0)

    model_config = SettingsConfigDict(env_prefix="MCPANEL_CONTAINERS_")


class ConfigSchema(BaseModel):
    web_server: WebServerConfigSchema = Field(default_factory=WebServerConfigSchema)
    containers: ContainersConfigSchema = Field(default_factory=ContainersConfigSchema)
