import asyncio
import contextlib
import logging
import threading
from typing import Any
from mcpanel.utils.random import random_id
from mcpanel.utils.time import utc_now_iso
from .record import ContainerRecord, ContainerStatus, DEFAULT_CONTAINER_CONFIG

__all__ = ["ContainerRegistry"]

logger = logging.getLogger(__name__)


class ContainerRegistry:
    """In-memory container store. The only component allowed to mutate records"""

    timestamp_fields: tuple[str, ...] = ("started_at", "stopped_at")

    def __init__(self, defaults: dict | None = None, *, events_queue: asyncio.Queue | None = None) -> None:
        self._defaults: dict = {**DEFAULT_CONTAINER_CONFIG, **(defaults or {})}
        self._events_queue: asyncio.Queue | None = events_queue

        self._lock = threading.Lock()
        self._containers: dict[str, ContainerRecord] = {}
        self._tombstones: set[str] = set()

    def __len__(self) -> int:
        with self._lock:
            return len(self._containers)

    def create(self, config: dict) -> ContainerRecord:
        """Store a new container with status 'created'. Omitted (None) config values take defaults"""
        values = {**self._defaults, **{k: v for k, v in config.items() if v is not None}}

        with self._lock:
            container_id = self._gen_id()

            container = ContainerRecord(
                id=container_id,
                status=ContainerStatus.CREATED,
                created_at=utc_now_iso(),
                **values,
            )

            self._containers[container_id] = container
            snapshot = container.model_copy()

        self._publish_event("created", snapshot)

        return snapshot

    def get(self, container_id: str) -> ContainerRecord | None:
        with self._lock:
            container = self._containers.get(container_id)
            return container.model_copy() if container else None

    def all(self) -> list[ContainerRecord]:
        with self._lock:
            return [c.model_copy() for c in self._containers.values()]

    def delete(self, container_id: str) -> ContainerRecord | None:
        with self._lock:
            container = self._containers.pop(container_id, None)

            if not container:
                return None

            self._tombstones.add(container_id)

        self._publish_event("deleted", container)

        return container

    def set_status(self, container_id: str, status: ContainerStatus, timestamp_field: str | None = None) -> ContainerRecord | None:
        """Update status (and optionally stamp a timestamp field). Returns None if the container is gone"""
        if timestamp_field and timestamp_field not in self.timestamp_fields:
            raise ValueError(f"Unknown timestamp field: {timestamp_field}")

        with self._lock:
            container = self._containers.get(container_id)

            if not container:
                return None

            container.status = ContainerStatus(status)

            if timestamp_field:
                setattr(container, timestamp_field, utc_now_iso())

            snapshot = container.model_copy()

        self._publish_event("status", snapshot)

        return snapshot

    def is_tombstoned(self, container_id: str) -> bool:
        with self._lock:
            return container_id in self._tombstones

    def _gen_id(self) -> str:
        # ids are never reused, not even ids of deleted containers
        while True:
            container_id = random_id()

            if container_id not in self._containers and container_id not in self._tombstones:
                return container_id

    def _publish_event(self, event: str, container: ContainerRecord) -> None:
        if self._events_queue is None:
            return

        data: dict[str, Any] = {"event": event, "container": container.to_dict()}

        try:
            self._events_queue.put_nowait(("containers", data))
        except asyncio.QueueFull:
            logger.warning("Events queue is full. dropping oldest event")
            with contextlib.suppress(Exception):
                self._events_queue.get_nowait()
                self._events_queue.task_done()
                self._events_queue.put_nowait(("containers", data))
