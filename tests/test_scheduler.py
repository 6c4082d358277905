import asyncio
import pytest
from mcpanel.exceptions import ContainerNotFoundError, ProvisioningFailedError
from mcpanel.libraries.containers import (
    ContainerRecord,
    ContainerRegistry,
    ContainerStatus,
    SimulatedBackend,
    TransitionScheduler,
)
from conftest import START_DELAY, STOP_DELAY


def _drain_statuses(q: asyncio.Queue, container_id: str) -> list[str]:
    statuses = []

    while not q.empty():
        (_, data) = q.get_nowait()

        if data["event"] == "status" and data["container"]["id"] == container_id:
            statuses.append(data["container"]["status"])

    return statuses


class FailingBackend(SimulatedBackend):

    async def start(self, container: ContainerRecord) -> None:
        await super().start(container)
        raise ProvisioningFailedError("image pull failed")


class CrashingBackend(SimulatedBackend):

    async def stop(self, container: ContainerRecord) -> None:
        raise RuntimeError("runtime socket closed")


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_resolves_to_running(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})

        assert container.status == ContainerStatus.CREATED
        assert registry.get(container.id).status == ContainerStatus.CREATED
        assert scheduler.pending(container.id) == 1

        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.RUNNING
        assert container.started_at is not None
        assert scheduler.pending() == 0

    @pytest.mark.asyncio
    async def test_create_then_delete_is_noop(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        scheduler.delete(container.id)

        await scheduler.wait_idle()

        assert registry.get(container.id) is None
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_create_completion_overwrites_interim_stop(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        scheduler.stop(container.id)

        # stop resolves first, the pending create completion then wins
        await asyncio.sleep(STOP_DELAY * 3)
        assert registry.get(container.id).status == ContainerStatus.STOPPED

        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.RUNNING
        assert container.stopped_at is not None
        assert container.started_at is not None


class TestStart:

    @pytest.mark.asyncio
    async def test_start_when_running_is_noop(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()

        result = scheduler.start(container.id)

        assert not result.accepted
        assert result.container.status == ContainerStatus.RUNNING
        assert scheduler.pending(container.id) == 0
        assert registry.get(container.id).status == ContainerStatus.RUNNING

    @pytest.mark.asyncio
    async def test_start_stopped_container(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()
        scheduler.stop(container.id)
        await scheduler.wait_idle()
        first_start = registry.get(container.id).started_at

        result = scheduler.start(container.id)

        assert result.accepted
        assert result.container.status == ContainerStatus.STARTING
        assert registry.get(container.id).status == ContainerStatus.STARTING

        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.RUNNING
        assert container.started_at >= first_start

    def test_start_unknown(self, scheduler: TransitionScheduler):
        with pytest.raises(ContainerNotFoundError):
            scheduler.start("missing")


class TestStop:

    @pytest.mark.asyncio
    async def test_stop_resolves_to_stopped(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()

        result = scheduler.stop(container.id)

        assert result.accepted
        assert registry.get(container.id).status == ContainerStatus.STOPPING

        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.STOPPED
        assert container.stopped_at is not None

    @pytest.mark.asyncio
    async def test_stop_when_stopped_is_noop(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()
        scheduler.stop(container.id)
        await scheduler.wait_idle()

        result = scheduler.stop(container.id)

        assert not result.accepted
        assert result.container.status == ContainerStatus.STOPPED
        assert scheduler.pending(container.id) == 0

    def test_stop_unknown(self, scheduler: TransitionScheduler):
        with pytest.raises(ContainerNotFoundError):
            scheduler.stop("missing")


class TestRestart:

    @pytest.mark.asyncio
    async def test_restart_order(self, backend: SimulatedBackend):
        q = asyncio.Queue()
        registry = ContainerRegistry(events_queue=q)
        scheduler = TransitionScheduler(registry, backend)

        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()
        _drain_statuses(q, container.id)

        result = scheduler.restart(container.id)

        assert result.accepted
        assert result.container.status == ContainerStatus.STOPPING

        await asyncio.sleep(STOP_DELAY * 3)
        assert registry.get(container.id).status == ContainerStatus.STARTING

        await scheduler.wait_idle()

        assert _drain_statuses(q, container.id) == ["stopping", "starting", "running"]
        assert registry.get(container.id).started_at is not None

    @pytest.mark.asyncio
    async def test_restart_stopped_container(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()
        scheduler.stop(container.id)
        await scheduler.wait_idle()

        assert scheduler.restart(container.id).accepted

        await scheduler.wait_idle()

        assert registry.get(container.id).status == ContainerStatus.RUNNING

    @pytest.mark.asyncio
    async def test_delete_during_restart(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()

        scheduler.restart(container.id)
        await asyncio.sleep(STOP_DELAY * 3)
        scheduler.delete(container.id)

        await scheduler.wait_idle()

        assert registry.get(container.id) is None

    def test_restart_unknown(self, scheduler: TransitionScheduler):
        with pytest.raises(ContainerNotFoundError):
            scheduler.restart("missing")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_is_immediate(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})

        deleted = scheduler.delete(container.id)

        assert deleted.id == container.id
        assert registry.get(container.id) is None

        with pytest.raises(ContainerNotFoundError):
            scheduler.start(container.id)

        await scheduler.wait_idle()

    def test_delete_unknown(self, scheduler: TransitionScheduler):
        with pytest.raises(ContainerNotFoundError):
            scheduler.delete("missing")

    @pytest.mark.asyncio
    async def test_delete_twice(self, scheduler: TransitionScheduler):
        container = scheduler.create({"name": "Survival"})
        scheduler.delete(container.id)

        with pytest.raises(ContainerNotFoundError):
            scheduler.delete(container.id)

        await scheduler.wait_idle()


class TestBackendFailure:

    @pytest.mark.asyncio
    async def test_failed_start_resolves_to_stopped(self, registry: ContainerRegistry):
        scheduler = TransitionScheduler(registry, FailingBackend(start_delay=START_DELAY, stop_delay=STOP_DELAY))

        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()
        scheduler.stop(container.id)
        await scheduler.wait_idle()

        scheduler.start(container.id)
        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.STOPPED
        assert container.stopped_at is not None

    @pytest.mark.asyncio
    async def test_unexpected_backend_error_resolves_to_stopped(self, registry: ContainerRegistry):
        scheduler = TransitionScheduler(registry, CrashingBackend(start_delay=START_DELAY, stop_delay=STOP_DELAY))

        container = scheduler.create({"name": "Survival"})
        await scheduler.wait_idle()

        scheduler.stop(container.id)
        assert registry.get(container.id).status == ContainerStatus.STOPPING
        await scheduler.wait_idle()

        container = registry.get(container.id)
        assert container.status == ContainerStatus.STOPPED
        assert container.stopped_at is not None
        assert scheduler.pending() == 0


class TestShutdown:

    @pytest.mark.asyncio
    async def test_shutdown_cancels_pending(self, scheduler: TransitionScheduler, registry: ContainerRegistry):
        container = scheduler.create({"name": "Survival"})

        await scheduler.shutdown()

        assert scheduler.pending() == 0
        assert registry.get(container.id).status == ContainerStatus.CREATED
