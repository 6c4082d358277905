import logging
from aiohttp import web
from mcpanel.utils.web import get_di
from mcpanel.utils.validate import validate_request
from mcpanel.services.containers import ContainersService
from mcpanel.schemas.containers import CreateContainerSchema
from mcpanel.exceptions import ContainerNotFoundError

containers_routes = web.RouteTableDef()
logger = logging.getLogger(__name__)

not_found = {"error": "Server not found"}


@containers_routes.post("/api/servers")
@validate_request(CreateContainerSchema)
async def container_create(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    data: CreateContainerSchema = request["data"]

    try:
        container = containers_service.create_container(**data.model_dump())
    except Exception as e:
        logger.exception(f"Failed to create container '{data.name}' ({e})")
        return web.json_response({"error": str(e)}, status=500)

    return web.json_response({"success": True, "container": container.to_dict()}, status=201)


@containers_routes.get("/api/servers")
async def containers_get(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    try:
        servers = containers_service.list_containers_with_usage()
    except Exception as e:
        logger.exception(f"Failed to list containers ({e})")
        return web.json_response({"error": str(e)}, status=500)

    return web.json_response({"success": True, "servers": servers})


@containers_routes.get("/api/servers/{container_id}")
async def container_get(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    container = containers_service.get_container(request.match_info["container_id"])

    if not container:
        return web.json_response(not_found, status=404)

    return web.json_response({"success": True, "container": container.to_dict()})


@containers_routes.post("/api/servers/{container_id}/start")
async def container_start(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    container_id = request.match_info["container_id"]

    try:
        result = containers_service.start_container(container_id)
    except ContainerNotFoundError:
        return web.json_response(not_found, status=404)
    except Exception as e:
        logger.exception(f"Failed to start container '{container_id}' ({e})")
        return web.json_response({"error": str(e)}, status=500)

    if not result.accepted:
        return web.json_response({"success": False, "message": "Already running"})

    return web.json_response({"success": True, "message": "Server starting"})


@containers_routes.post("/api/servers/{container_id}/stop")
async def container_stop(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    container_id = request.match_info["container_id"]

    try:
        result = containers_service.stop_container(container_id)
    except ContainerNotFoundError:
        return web.json_response(not_found, status=404)
    except Exception as e:
        logger.exception(f"Failed to stop container '{container_id}' ({e})")
        return web.json_response({"error": str(e)}, status=500)

    if not result.accepted:
        return web.json_response({"success": False, "message": "Already stopped"})

    return web.json_response({"success": True, "message": "Server stopping"})


@containers_routes.post("/api/servers/{container_id}/restart")
async def container_restart(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    container_id = request.match_info["container_id"]

    try:
        containers_service.restart_container(container_id)
    except ContainerNotFoundError:
        return web.json_response(not_found, status=404)
    except Exception as e:
        logger.exception(f"Failed to restart container '{container_id}' ({e})")
        return web.json_response({"error": str(e)}, status=500)

    return web.json_response({"success": True, "message": "Server restarting"})


@containers_routes.delete("/api/servers/{container_id}")
async def container_delete(request: web.Request):
    containers_service: ContainersService = get_di(request).containers_service

    container_id = request.match_info["container_id"]

    try:
        containers_service.delete_container(container_id)
    except ContainerNotFoundError:
        return web.json_response(not_found, status=404)
    except Exception as e:
        logger.exception(f"Failed to delete container '{container_id}' ({e})")
        return web.json_response({"error": str(e)}, status=500)

    return web.json_response({"success": True, "message": "Server deleted"})
