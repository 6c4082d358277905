__all__ = [
    "McPanelRuntimeError",
    "ExitSignal",
    "SIGHUPSignal",
    "ContainerNotFoundError",
    "ProvisioningFailedError",
]


class McPanelRuntimeError(Exception):
    pass


class ExitSignal(Exception):
    pass


class SIGHUPSignal(Exception):
    pass


class ContainerNotFoundError(Exception):
    def __init__(self, container_id: str) -> None:
        super().__init__(f"Container not found: {container_id}")
        self.container_id: str = container_id


class ProvisioningFailedError(Exception):
    """Raised by a container backend when an operation could not be completed"""

    pass
