import math
import random
from mcpanel.utils.random import random_usage
from .record import ContainerRecord, ContainerStatus

__all__ = ["synthetic_usage"]


def synthetic_usage(container: ContainerRecord) -> dict:
    """Display-only resource figures. Not stored anywhere"""
    if container.status != ContainerStatus.RUNNING:
        return {"cpuUsage": 0, "ramUsage": 0, "players": 0}

    return {
        "cpuUsage": random_usage(10, 30),
        "ramUsage": random_usage(30, 40),
        "players": math.floor(random.random() * container.max_players * 0.3),
    }
