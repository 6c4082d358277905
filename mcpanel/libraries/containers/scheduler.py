import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable
from mcpanel.exceptions import ContainerNotFoundError, ProvisioningFailedError
from .backend import ContainerBackend
from .record import ContainerRecord, ContainerStatus
from .registry import ContainerRegistry

__all__ = ["TransitionResult", "TransitionScheduler"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition request. accepted=False means the container was
    already in the requested state and nothing was scheduled"""

    accepted: bool
    container: ContainerRecord


class TransitionScheduler:
    """Container lifecycle state machine.

    Every request applies its immediate effect synchronously through the registry
    and schedules the completion as a background task. Scheduled completions are
    never cancelled by later requests: overlapping transitions on one container
    resolve last-write-wins, and completions firing after a delete are no-ops.
    """

    def __init__(self, registry: ContainerRegistry, backend: ContainerBackend) -> None:
        self._registry: ContainerRegistry = registry
        self._backend: ContainerBackend = backend

        self._tasks: dict[str, set[asyncio.Task]] = {}

    def create(self, config: dict) -> ContainerRecord:
        container = self._registry.create(config)

        logger.info(f'Creating container "{container.name}" ({container.server_type} {container.server_version})')

        self._schedule(container.id, "create", self._complete_create, container)

        return container

    def start(self, container_id: str) -> TransitionResult:
        container = self._get_container(container_id)

        if container.status == ContainerStatus.RUNNING:
            return TransitionResult(False, container)

        container = self._set_status(container_id, ContainerStatus.STARTING)

        logger.info(f"Starting container {container.name}")

        self._schedule(container_id, "start", self._complete_start, container)

        return TransitionResult(True, container)

    def stop(self, container_id: str) -> TransitionResult:
        container = self._get_container(container_id)

        if container.status == ContainerStatus.STOPPED:
            return TransitionResult(False, container)

        container = self._set_status(container_id, ContainerStatus.STOPPING)

        logger.info(f"Stopping container {container.name}")

        self._schedule(container_id, "stop", self._complete_stop, container)

        return TransitionResult(True, container)

    def restart(self, container_id: str) -> TransitionResult:
        self._get_container(container_id)

        container = self._set_status(container_id, ContainerStatus.STOPPING)

        logger.info(f"Restarting container {container.name}")

        self._schedule(container_id, "restart", self._complete_restart, container)

        return TransitionResult(True, container)

    def delete(self, container_id: str) -> ContainerRecord:
        container = self._registry.delete(container_id)

        if not container:
            raise ContainerNotFoundError(container_id)

        logger.info(f"Deleted container {container.name}")

        self._schedule(container_id, "destroy", self._backend.destroy, container)

        return container

    def pending(self, container_id: str | None = None) -> int:
        """Number of scheduled completions not yet fired (for one container or overall)"""
        if container_id is not None:
            return len(self._tasks.get(container_id, ()))

        return sum(len(tasks) for tasks in self._tasks.values())

    async def wait_idle(self) -> None:
        """Wait until every scheduled completion has fired"""
        while self._tasks:
            tasks = [task for tasks in self._tasks.values() for task in tasks]
            await asyncio.gather(*tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel all pending completions. Only used when the process exits"""
        if not self.pending():
            return

        tasks = [task for tasks in self._tasks.values() for task in tasks]

        logger.info(f"Cancelling {len(tasks)} pending container transition(s)")

        for task in tasks:
            task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)

    async def _complete_create(self, container: ContainerRecord) -> None:
        if not await self._call_backend(self._backend.provision, container):
            return

        if not self._registry.set_status(container.id, ContainerStatus.RUNNING, "started_at"):
            self._log_vanished(container, "create")
            return

        logger.info(f"Container {container.name} ({container.id[:12]}) is now running")

    async def _complete_start(self, container: ContainerRecord) -> None:
        if not await self._call_backend(self._backend.start, container):
            return

        if not self._registry.set_status(container.id, ContainerStatus.RUNNING, "started_at"):
            self._log_vanished(container, "start")
            return

        logger.info(f"Container {container.name} started")

    async def _complete_stop(self, container: ContainerRecord) -> None:
        if not await self._call_backend(self._backend.stop, container):
            return

        if not self._registry.set_status(container.id, ContainerStatus.STOPPED, "stopped_at"):
            self._log_vanished(container, "stop")
            return

        logger.info(f"Container {container.name} stopped")

    async def _complete_restart(self, container: ContainerRecord) -> None:
        # two independent writes: stop resolution, then start resolution
        if not await self._call_backend(self._backend.stop, container):
            return

        if not self._registry.set_status(container.id, ContainerStatus.STARTING):
            self._log_vanished(container, "restart")
            return

        if not await self._call_backend(self._backend.start, container):
            return

        if not self._registry.set_status(container.id, ContainerStatus.RUNNING, "started_at"):
            self._log_vanished(container, "restart")
            return

        logger.info(f"Container {container.name} restarted")

    async def _call_backend(self, operation: Callable[[ContainerRecord], Awaitable[None]], container: ContainerRecord) -> bool:
        """Run a backend operation. On failure the container is resolved to stopped so it
        never stays in a transient state"""
        try:
            await operation(container)
        except ProvisioningFailedError as e:
            logger.error(f"Container {container.name} ({container.id[:12]}) failed: {e}")
        except Exception as e:
            logger.exception(f"Backend {operation.__name__} failed for container {container.id[:12]}: {e}")
        else:
            return True

        self._registry.set_status(container.id, ContainerStatus.STOPPED, "stopped_at")

        return False

    def _get_container(self, container_id: str) -> ContainerRecord:
        container = self._registry.get(container_id)

        if not container:
            raise ContainerNotFoundError(container_id)

        return container

    def _set_status(self, container_id: str, status: ContainerStatus) -> ContainerRecord:
        container = self._registry.set_status(container_id, status)

        if not container:
            raise ContainerNotFoundError(container_id)

        return container

    def _log_vanished(self, container: ContainerRecord, action: str) -> None:
        reason = "was deleted" if self._registry.is_tombstoned(container.id) else "is unknown"
        logger.debug(f"Dropping {action} completion, container {container.id[:12]} {reason}")

    def _schedule(self, container_id: str, action: str, func: Callable[[ContainerRecord], Awaitable[None]], container: ContainerRecord) -> None:
        task = asyncio.create_task(self._run(action, func, container), name=f"container_{action}_{container_id[:12]}")

        self._tasks.setdefault(container_id, set()).add(task)
        task.add_done_callback(partial(self._task_done, container_id))

    async def _run(self, action: str, func: Callable[[ContainerRecord], Awaitable[None]], container: ContainerRecord) -> None:
        try:
            await func(container)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Scheduled {action} for container {container.id[:12]} failed: {e}")

    def _task_done(self, container_id: str, task: asyncio.Task) -> None:
        tasks = self._tasks.get(container_id)

        if tasks is None:
            return

        tasks.discard(task)

        if not tasks:
            del self._tasks[container_id]
