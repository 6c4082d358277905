import asyncio
from aiohttp import web
from mcpanel.libraries.di_container import DiContainer
from mcpanel.libraries.event_dispatcher import EventQueue

__all__ = ["get_di", "shutdown_websockets", "drain_queue_into_websocket"]


async def shutdown_websockets(app: web.Application) -> None:
    while app["websockets"]:
        ws = app["websockets"].pop()
        await ws.close()


async def drain_queue_into_websocket(q: EventQueue, ws: web.WebSocketResponse):
    while not ws.closed:
        try:
            msg = await q.get()

            if type(msg) is str:
                await ws.send_str(msg)
            else:
                await ws.send_json(msg)
        except asyncio.CancelledError:
            break

        q.task_done()


def get_di(request: web.Request) -> DiContainer:
    return request.app["di"]
