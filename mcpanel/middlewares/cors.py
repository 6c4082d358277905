from aiohttp import web
from mcpanel.utils.web import get_di

__all__ = ["cors_middleware"]

allowed_methods = "GET, POST, PUT, PATCH, DELETE, OPTIONS"


@web.middleware
async def cors_middleware(request, handler):
    origin = get_di(request).web_server_config["cors_origin"]

    # answer preflight requests before auth and routing
    if request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers:
        response = web.Response(status=204)
        response.headers["Access-Control-Allow-Methods"] = allowed_methods
        response.headers["Access-Control-Allow-Headers"] = request.headers.get("Access-Control-Request-Headers", "*")
    else:
        try:
            response = await handler(request)
        except web.HTTPException as e:
            e.headers["Access-Control-Allow-Origin"] = origin
            raise

    if not response.prepared:
        response.headers["Access-Control-Allow-Origin"] = origin

    return response
