from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ContainerStatus", "ContainerRecord", "DEFAULT_CONTAINER_CONFIG"]


class ContainerStatus(str, Enum):
    CREATED = "created"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


DEFAULT_CONTAINER_CONFIG: dict = {
    "server_type": "paper",
    "server_version": "1.21.1",
    "port": 25565,
    "ram_mb": 2048,
    "max_players": 20,
}


class ContainerRecord(BaseModel):
    """Stored state of one game server container"""

    id: str
    name: str
    server_type: str = Field(alias="type")
    server_version: str = Field(alias="version")
    port: int
    ram_mb: int = Field(alias="ramMb")
    max_players: int = Field(alias="maxPlayers")
    status: ContainerStatus = ContainerStatus.CREATED
    created_at: str = Field(alias="createdAt")
    started_at: Optional[str] = Field(default=None, alias="startedAt")
    stopped_at: Optional[str] = Field(default=None, alias="stoppedAt")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
