import time
from aiohttp import web
from mcpanel.utils.web import get_di
from mcpanel.utils.time import utc_now_iso
from mcpanel.services.containers import ContainersService

health_routes = web.RouteTableDef()


@health_routes.get("/health")
async def health_get(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    return web.json_response(
        {
            "status": "ok",
            "uptime": round(time.monotonic() - request.app["started_at"], 3),
            "containers": containers_service.count_containers(),
            "timestamp": utc_now_iso(),
        }
    )
