import asyncio
from mcpanel.libraries.di_container import DiContainer
from mcpanel.libraries.event_dispatcher import EventDispatcher
from mcpanel.libraries.containers import ContainerRegistry, ContainerBackend, SimulatedBackend, TransitionScheduler
from mcpanel.services.containers import ContainersService
from mcpanel.schemas.config import ConfigSchema

__all__ = ["setup_di"]


def setup_di(deps: DiContainer, *, config: dict, backend: ContainerBackend | None = None) -> None:
    config_obj = ConfigSchema(**config)

    web_server_config = config_obj.web_server.model_dump()
    containers_config = config_obj.containers.model_dump()

    web_server_config["ip"] = str(web_server_config["ip"])

    # data
    deps.web_server_config = web_server_config
    deps.containers_config = containers_config

    # queues
    deps.containers_ev_queue = asyncio.Queue(maxsize=1000)

    # libraries
    deps.container_registry = ContainerRegistry(
        {
            "server_type": containers_config["default_type"],
            "server_version": containers_config["default_version"],
            "port": containers_config["default_port"],
            "ram_mb": containers_config["default_ram_mb"],
            "max_players": containers_config["default_max_players"],
        },
        events_queue=deps.containers_ev_queue,
    )
    deps.container_backend = backend or SimulatedBackend(
        start_delay=containers_config["start_delay"],
        stop_delay=containers_config["stop_delay"],
    )
    deps.transition_scheduler = TransitionScheduler(deps.container_registry, deps.container_backend)
    deps.containers_ev_dispatcher = EventDispatcher(deps.containers_ev_queue)

    # services
    deps.containers_service = ContainersService(registry=deps.container_registry, scheduler=deps.transition_scheduler)
