"""
Liveness endpoint for hosting platforms that expect an open HTTP port.
"""

from aiohttp import web

from .logging import logger


HEALTH_MESSAGE = "Discord bot is running."


async def handle_root(request: web.Request) -> web.Response:
    """Answer liveness probes."""
    return web.Response(text=HEALTH_MESSAGE)


def create_health_app() -> web.Application:
    """Build the aiohttp application serving the liveness endpoint."""
    app = web.Application()
    app.router.add_get("/", handle_root)
    return app


async def start_health_server(port: int, host: str = "0.0.0.0") -> web.AppRunner:
    """Start the liveness server on the running event loop.

    Args:
        port: TCP port to listen on.
        host: Interface to bind.

    Returns:
        The runner; call its cleanup() on shutdown.
    """
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Health server listening on port {port}")
    return runner
