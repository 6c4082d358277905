from datetime import datetime, timezone

__all__ = ["utc_now_iso"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
