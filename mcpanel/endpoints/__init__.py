from aiohttp import web
from .health import health_routes
from .containers import containers_routes
from .events import events_routes

__all__ = ["setup"]


def setup(app: web.Application) -> None:
    app.add_routes(health_routes)
    app.add_routes(containers_routes)
    app.add_routes(events_routes)
