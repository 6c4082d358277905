import random
import secrets

__all__ = ["random_id", "random_usage"]


def random_id(nbytes: int = 16) -> str:
    return secrets.token_hex(nbytes)


def random_usage(low: float, spread: float, ndigits: int = 1) -> float:
    return round(random.random() * spread + low, ndigits)
