from aiohttp import web
from .cors import cors_middleware
from .auth import auth_middleware

__all__ = ["setup"]


def setup(app: web.Application) -> None:
    app.middlewares.append(cors_middleware)
    app.middlewares.append(auth_middleware)
