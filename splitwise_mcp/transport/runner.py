"""Run an aiohttp application until SIGINT/SIGTERM."""

from __future__ import annotations

import asyncio
import logging
import signal

from aiohttp import web

from splitwise_mcp.core.errors import SplitwiseMCPError

logger = logging.getLogger(__name__)

# Seconds open handlers (WebSocket sessions, SSE streams) get before being cancelled
SHUTDOWN_TIMEOUT = 0.25


class ServerStartError(SplitwiseMCPError):
    """Raised when a listener cannot bind (e.g. port already in use)."""


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops; KeyboardInterrupt still ends asyncio.run()
            pass


async def serve_app(
    app: web.Application,
    host: str,
    port: int,
    *,
    stop: asyncio.Event | None = None,
    started: asyncio.Event | None = None,
) -> None:
    """Serve ``app`` on host:port until ``stop`` is set or a signal arrives.

    In-flight requests are not drained on shutdown: handlers still running
    after ``SHUTDOWN_TIMEOUT`` are cancelled.

    Args:
        app: The aiohttp application.
        host: Interface to bind.
        port: TCP port to bind.
        stop: Optional event that ends serving when set.
        started: Optional event set once the listener is bound.

    Raises:
        ServerStartError: If the listener cannot bind.
    """
    stop = stop or asyncio.Event()
    _install_signal_handlers(stop)

    runner = web.AppRunner(app, shutdown_timeout=SHUTDOWN_TIMEOUT)
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        try:
            await site.start()
        except OSError as e:
            raise ServerStartError(f"Cannot listen on {host}:{port}: {e.strerror or e}") from e

        if started is not None:
            started.set()
        await stop.wait()
        logger.info("Shutting down...")
    finally:
        await runner.cleanup()
        logger.info("Server closed")
