from mcpanel.libraries.containers import (
    ContainerRecord,
    ContainerRegistry,
    TransitionResult,
    TransitionScheduler,
    synthetic_usage,
)


class ContainersService:

    def __init__(self, *, registry: ContainerRegistry, scheduler: TransitionScheduler) -> None:
        self._registry: ContainerRegistry = registry
        self._scheduler: TransitionScheduler = scheduler

    def create_container(self, **kwargs) -> ContainerRecord:
        return self._scheduler.create(kwargs)

    def get_container(self, container_id: str) -> ContainerRecord | None:
        return self._registry.get(container_id)

    def list_containers_with_usage(self) -> list[dict]:
        return [{**container.to_dict(), **synthetic_usage(container)} for container in self._registry.all()]

    def count_containers(self) -> int:
        return len(self._registry)

    def start_container(self, container_id: str) -> TransitionResult:
        return self._scheduler.start(container_id)

    def stop_container(self, container_id: str) -> TransitionResult:
        return self._scheduler.stop(container_id)

    def restart_container(self, container_id: str) -> TransitionResult:
        return self._scheduler.restart(container_id)

    def delete_container(self, container_id: str) -> ContainerRecord:
        return self._scheduler.delete(container_id)
