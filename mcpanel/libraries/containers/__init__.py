from .record import ContainerStatus, ContainerRecord, DEFAULT_CONTAINER_CONFIG
from .registry import ContainerRegistry
from .backend import ContainerBackend, SimulatedBackend
from .scheduler import TransitionResult, TransitionScheduler
from .usage import synthetic_usage

__all__ = [
    "ContainerStatus",
    "ContainerRecord",
    "DEFAULT_CONTAINER_CONFIG",
    "ContainerRegistry",
    "ContainerBackend",
    "SimulatedBackend",
    "TransitionResult",
    "TransitionScheduler",
    "synthetic_usage",
]
