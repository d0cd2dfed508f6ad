import asyncio
import logging
from typing import Optional
from fastapi import FastAPI
from uvicorn import Config, Server

STARTUP_POLL_INTERVAL = 0.05  # seconds


def create_app() -> FastAPI:
    """Liveness-only app: one route, always 200."""
    app = FastAPI(title="catstare-bot health", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    return app


class HealthServer:
    """Runs the health app on uvicorn inside the bot's event loop."""

    def __init__(self, port: int, host: str = "0.0.0.0"):
        self.host = host
        self.port = port
        self._server: Optional[Server] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def uri(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it can't bind
            raise RuntimeError(f"Health check server failed to start at {self.uri}") from e

    async def start(self) -> None:
        """Starts serving and returns once the port is bound. Raises RuntimeError if it never binds."""
        config = Config(create_app(), host=self.host, port=self.port, log_level="warning")
        self._server = Server(config)
        self._task = asyncio.create_task(self._serve())
        while not self._server.started:
            if self._task.done():
                task, self._task, self._server = self._task, None, None
                task.result()
                raise RuntimeError(f"Health check server stopped before starting at {self.uri}")
            await asyncio.sleep(STARTUP_POLL_INTERVAL)
        logging.info(f"Started health check server at {self.uri}.")

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.should_exit = True
        if self._task is not None:
            await self._task
        self._server = None
        self._task = None
