import asyncio
import logging

import uvicorn

from app.core.config import settings

logger = logging.getLogger(__name__)


class ApiServer:
    """Owns the uvicorn server for one process.

    `run()` returns once either `stop()` is called or uvicorn exits on its
    own (SIGINT/SIGTERM are handled by uvicorn and end `serve()`).
    """

    def __init__(self, app="app.main:app", host: str | None = None, port: int | None = None):
        self.app = app
        self.host = host or settings.SERVICE_HOST
        self.port = port or settings.SERVICE_PORT
        self._server: uvicorn.Server | None = None
        self._stop = asyncio.Event()

    async def run(self) -> None:
        cfg = uvicorn.Config(self.app, host=self.host, port=self.port, log_level=settings.LOG_LEVEL.lower())
        self._server = uvicorn.Server(cfg)
        serve = asyncio.create_task(self._server.serve())
        stop = asyncio.create_task(self._stop.wait())
        logger.info("API server starting on http://%s:%s", self.host, self.port)

        await asyncio.wait({serve, stop}, return_when=asyncio.FIRST_COMPLETED)
        self._server.should_exit = True
        stop.cancel()
        await serve
        logger.info("API server stopped")

    def stop(self) -> None:
        self._stop.set()


def main():
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    asyncio.run(ApiServer().run())

if __name__ == "__main__":
    main()
