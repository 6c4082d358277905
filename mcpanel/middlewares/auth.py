import hmac
import logging
from aiohttp import web
from mcpanel.utils.web import get_di

__all__ = ["auth_middleware"]

logger = logging.getLogger(__name__)

protected_prefixes = ("/api/", "/ws/")


@web.middleware
async def auth_middleware(request, handler):
    if not request.path.startswith(protected_prefixes):
        return await handler(request)

    api_key = get_di(request).web_server_config["api_key"]
    key = request.headers.get("x-api-key", "")

    if not key or not hmac.compare_digest(key.encode(), api_key.encode()):
        logger.debug(f"Rejected {request.method} {request.path}: invalid API key")
        return web.json_response({"error": "Unauthorized: Invalid API key"}, status=401)

    return await handler(request)
