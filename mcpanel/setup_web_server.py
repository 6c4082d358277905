import time
from aiohttp import web
from mcpanel.middlewares import setup as _setup_middlewares
from mcpanel.endpoints import setup as _setup_endpoints
from mcpanel.utils.web import shutdown_websockets

__all__ = ["setup_web_server"]


def setup_web_server(app: web.Application) -> None:
    _setup_variables(app)
    _setup_middlewares(app)
    _setup_endpoints(app)
    _setup_on_startup(app)
    _setup_on_shutdown(app)


def _setup_variables(app: web.Application) -> None:
    app["websockets"] = set()
    app["started_at"] = time.monotonic()


def _setup_on_startup(app: web.Application) -> None:
    app.on_startup.append(lambda x: app["di"].containers_ev_dispatcher.start())


def _setup_on_shutdown(app: web.Application) -> None:
    app.on_shutdown.append(shutdown_websockets)
    app.on_shutdown.append(lambda x: app["di"].containers_ev_dispatcher.stop())
