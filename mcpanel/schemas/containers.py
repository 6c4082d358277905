from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError
from typing import Optional


class CreateContainerSchema(BaseModel):
    name: str = Field(title="Server Name", max_length=100)
    server_type: Optional[str] = Field(default=None, title="Server Type", alias="type", min_length=1, max_length=50)
    server_version: Optional[str] = Field(default=None, title="Server Version", alias="version", min_length=1, max_length=50)
    port: Optional[int] = Field(default=None, title="Port", ge=1, le=65535)
    ram_mb: Optional[int] = Field(default=None, title="RAM (MB)", alias="ramMb", gt=0)
    max_players: Optional[int] = Field(default=None, title="Max Players", alias="maxPlayers", gt=0)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def check_name(cls, values):
        if isinstance(values, dict) and not values.get("name"):
            raise PydanticCustomError("name_required", "Server name is required")
        return values

    @field_validator("server_type", "server_version", "port", "ram_mb", "max_players", mode="before")
    @classmethod
    def empty_to_default(cls, v):
        # empty values mean "use the configured default"
        if v is None or v == "" or (v == 0 and not isinstance(v, bool)):
            return None
        return v
