import os
import logging
import signal
import yaml
import asyncio
from aiohttp import web
from logging.handlers import TimedRotatingFileHandler
from mcpanel.libraries.cleanup_queue import CleanupQueue
from mcpanel.libraries.di_container import DiContainer
from mcpanel.schemas.config import DEFAULT_API_KEY
from mcpanel.setup_web_server import setup_web_server
from mcpanel.setup_di import setup_di
from mcpanel.exceptions import (
    McPanelRuntimeError,
    ExitSignal,
    SIGHUPSignal,
)

__all__ = ["McPanelManager"]
logger = logging.getLogger(__name__)

CONFIG_SEARCH_PATHS = (
    "/etc/mcpanel/config.yml",
    "/etc/opt/mcpanel/config.yml",
    "~/.config/mcpanel/config.yml",
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class McPanelManager:
    """Owns the process: logging, config, the event loop and the web server"""

    def __init__(
        self,
        *,
        log_file: str = "",
        log_level: str = "",
        config_file: str = "",
    ) -> None:
        self._init_logger(log_file, log_level)

        self._cleanup: CleanupQueue = CleanupQueue()
        self._di: DiContainer = DiContainer()

        setup_di(self._di, config=self._load_config(file=config_file))

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        self._stop_event: asyncio.Event = asyncio.Event()
        self._received_signal: type[Exception] = ExitSignal

        self._install_signal_handlers(loop)

        try:
            loop.run_until_complete(self._serve())
        except SIGHUPSignal:
            logger.info("Received SIGHUP signal")
        except ExitSignal:
            logger.info("Received termination signal")
        except Exception as e:
            logger.exception(e)
        finally:
            self._shutdown_loop(loop)

    def _load_config(self, *, file: str = "") -> dict:
        path = self._find_config_file(file)

        if not path:
            logger.info("No config file found, using defaults")
            return {}

        logger.info(f"Loading config from '{path}'")

        try:
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise McPanelRuntimeError(f"Failed to parse config file: {e}")

    def _find_config_file(self, file: str) -> str | None:
        # an explicit file must exist, the search paths are optional
        if file:
            if not os.path.isfile(file):
                raise McPanelRuntimeError(f"Config file not found: {file}")
            return file

        for path in CONFIG_SEARCH_PATHS:
            path = os.path.expanduser(path)

            if os.path.isfile(path):
                return path

        return None

    def _init_logger(self, log_file: str, log_level: str) -> None:
        level = getattr(logging, log_level) if log_level in LOG_LEVELS else logging.INFO

        handler = self._log_handler(log_file)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.addHandler(handler)

    def _log_handler(self, log_file: str) -> logging.Handler:
        if not log_file:
            return logging.StreamHandler()

        directory = os.path.dirname(log_file)

        if directory:
            os.makedirs(directory, exist_ok=True)

        return TimedRotatingFileHandler(log_file, when="midnight", backupCount=4)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        # exceptions raised inside loop callbacks never reach run_until_complete,
        # so handlers only record the signal and _serve raises it
        def on_signal(exc: type[Exception]) -> None:
            self._received_signal = exc
            self._stop_event.set()

        for sig in (signal.SIGTERM, signal.SIGINT, signal.SIGQUIT):
            loop.add_signal_handler(sig, on_signal, ExitSignal)

        loop.add_signal_handler(signal.SIGHUP, on_signal, SIGHUPSignal)

    def _shutdown_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            if self._cleanup.has_jobs:
                logger.info("Running cleanup jobs")
                loop.run_until_complete(self._cleanup.consume_all())

            leftover = list(asyncio.all_tasks(loop=loop))

            for task in leftover:
                task.cancel()

            results = loop.run_until_complete(asyncio.gather(*leftover, return_exceptions=True))

            for task, result in zip(leftover, results):
                if isinstance(result, Exception):
                    logger.error(f"Task {task.get_name()} raised during shutdown: {result!r}")

            loop.run_until_complete(loop.shutdown_asyncgens())
        finally:
            asyncio.set_event_loop(None)
            loop.close()

    async def _serve(self) -> None:
        web_config = self._di.web_server_config

        if web_config["api_key"] == DEFAULT_API_KEY:
            logger.warning("Using the default API key. Set MCPANEL_WEB_API_KEY or web_server.api_key in the config file")

        # pushed first so it runs last, after the web server is gone
        self._cleanup.push("scheduler_shutdown", self._di.transition_scheduler.shutdown)

        app = web.Application()
        app["di"] = self._di

        setup_web_server(app)

        runner = web.AppRunner(app, access_log=None)
        await runner.setup()

        self._cleanup.push("webserver_cleanup", runner.cleanup)

        await web.TCPSite(runner, web_config["ip"], web_config["port"]).start()

        logger.info(f"Webserver listening on {web_config['ip']}:{web_config['port']} (health: /health)")

        await self._stop_event.wait()

        raise self._received_signal
