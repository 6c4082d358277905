from types import SimpleNamespace

__all__ = ["DiContainer"]


class DiContainer(SimpleNamespace):
    """Attribute bag of application dependencies. Attributes are write-once"""

    def __setattr__(self, name: str, value) -> None:
        if hasattr(self, name):
            raise AttributeError(f"Cannot override existing dependency '{name}'")
        super().__setattr__(name, value)
