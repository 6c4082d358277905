import asyncio
import logging
from abc import ABC, abstractmethod
from mcpanel.exceptions import ProvisioningFailedError
from .record import ContainerRecord

__all__ = ["ContainerBackend", "SimulatedBackend", "ProvisioningFailedError"]

logger = logging.getLogger(__name__)


class ContainerBackend(ABC):
    """Container runtime interface. Each call returns once the operation completed,
    or raises ProvisioningFailedError if it failed"""

    @abstractmethod
    async def provision(self, container: ContainerRecord) -> None:
        pass

    @abstractmethod
    async def start(self, container: ContainerRecord) -> None:
        pass

    @abstractmethod
    async def stop(self, container: ContainerRecord) -> None:
        pass

    @abstractmethod
    async def destroy(self, container: ContainerRecord) -> None:
        pass


class SimulatedBackend(ContainerBackend):
    """Backend that only waits fixed delays. Never fails"""

    def __init__(self, *, start_delay: float = 3.0, stop_delay: float = 2.0) -> None:
        self.start_delay: float = start_delay
        self.stop_delay: float = stop_delay

    async def provision(self, container: ContainerRecord) -> None:
        logger.debug(f"Provisioning container {container.id[:12]} ({container.server_type} {container.server_version})")
        await asyncio.sleep(self.start_delay)

    async def start(self, container: ContainerRecord) -> None:
        await asyncio.sleep(self.start_delay)

    async def stop(self, container: ContainerRecord) -> None:
        await asyncio.sleep(self.stop_delay)

    async def destroy(self, container: ContainerRecord) -> None:
        return
