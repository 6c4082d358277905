import pytest
import pytest_asyncio
from aiohttp import web
from mcpanel.libraries.di_container import DiContainer
from mcpanel.libraries.containers import ContainerRegistry, SimulatedBackend, TransitionScheduler
from mcpanel.setup_di import setup_di
from mcpanel.setup_web_server import setup_web_server

API_KEY = "test-key"
START_DELAY = 0.1
STOP_DELAY = 0.02


@pytest.fixture()
def registry() -> ContainerRegistry:
    return ContainerRegistry()


@pytest.fixture()
def backend() -> SimulatedBackend:
    return SimulatedBackend(start_delay=START_DELAY, stop_delay=STOP_DELAY)


@pytest.fixture()
def scheduler(registry: ContainerRegistry, backend: SimulatedBackend) -> TransitionScheduler:
    return TransitionScheduler(registry, backend)


@pytest.fixture()
def di() -> DiContainer:
    deps = DiContainer()

    setup_di(
        deps,
        config={
            "web_server": {"api_key": API_KEY},
            "containers": {"start_delay": START_DELAY, "stop_delay": STOP_DELAY},
        },
    )

    return deps


@pytest_asyncio.fixture()
async def client(aiohttp_client, di: DiContainer):
    app = web.Application()
    app["di"] = di

    setup_web_server(app)

    test_client = await aiohttp_client(app)

    yield test_client

    await di.transition_scheduler.shutdown()


@pytest.fixture()
def auth() -> dict:
    return {"x-api-key": API_KEY}
