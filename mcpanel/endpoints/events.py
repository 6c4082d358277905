import logging
import asyncio
from aiohttp import web
from mcpanel.utils.web import get_di, drain_queue_into_websocket
from mcpanel.libraries.event_dispatcher import EventDispatcher

events_routes = web.RouteTableDef()
logger = logging.getLogger(__name__)


@events_routes.get("/ws/servers/events")
async def events_ws(request: web.Request) -> web.WebSocketResponse:
    ev_dispatcher: EventDispatcher = get_di(request).containers_ev_dispatcher
    ws = web.WebSocketResponse(heartbeat=30)

    await ws.prepare(request)

    request.app["websockets"].add(ws)

    q = ev_dispatcher.subscribe("containers")
    listener_task = asyncio.create_task(drain_queue_into_websocket(q, ws))

    try:
        async for msg in ws:
            if msg.type == web.WSMsgType.ERROR:
                logger.error(f"WebSocket connection closed with exception {ws.exception()}")
                break
    except Exception as e:
        logger.exception(f"Error in container events stream: {e}")
    finally:
        request.app["websockets"].discard(ws)
        if not ws.closed:
            await ws.close()

        listener_task.cancel()
        await asyncio.gather(listener_task, return_exceptions=True)
        ev_dispatcher.unsubscribe(q)

    return ws
