import asyncio
import logging
from typing import Optional
from aiohttp import web

from matte.application.registry import ENTITIES_RESOURCE, Matte

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
BODY_METHODS = {"POST", "PUT"}
REGISTRY_KEY = web.AppKey("registry", Matte)


def _json_response(text: str, status: int = 200) -> web.Response:
    return web.Response(text=text, status=status, content_type=JSON_CONTENT_TYPE, charset="utf-8")


async def handle_api(request: web.Request) -> web.Response:
    """
    Single entry point for every request. Controller-level errors travel
    inside a 200 response; only paths no resource owns get a wire-level 404.
    """
    registry = request.app[REGISTRY_KEY]
    path = request.path

    if request.method == "GET" and path == f"/api/{ENTITIES_RESOURCE}":
        return _json_response(registry.entities_json())

    body = ""
    if request.method in BODY_METHODS:
        # Undecodable bytes are replaced, whatever charset the client declares
        body = (await request.read()).decode("utf-8", errors="replace")

    # Controllers are synchronous; keep them off the event loop
    loop = asyncio.get_running_loop()
    response = await loop.run_in_executor(None, registry.dispatch, request.method, path, body)

    if response is None:
        return _json_response('{"error":"Not Found","status":404}', status=404)
    return _json_response(response)


def build_app(registry: Matte) -> web.Application:
    app = web.Application()
    app[REGISTRY_KEY] = registry
    app.router.add_route("*", "/{tail:.*}", handle_api)
    return app


class MatteServer:
    """
    Serves a registry over HTTP with aiohttp.
    """

    def __init__(self, registry: Matte):
        self.registry = registry
        self._runner: Optional[web.AppRunner] = None

    @property
    def running(self) -> bool:
        return self._runner is not None

    async def start(self) -> "MatteServer":
        if not self.registry.resource_names():
            logger.warning("No entities registered. Register entities before starting the server.")
            return self
        if self._runner is not None:
            return self

        runner = web.AppRunner(build_app(self.registry))
        await runner.setup()
        site = web.TCPSite(runner, self.registry.host, self.registry.port)
        await site.start()
        self._runner = runner

        logger.info(f"Server started on http://localhost:{self.registry.port}")
        self._log_endpoints()
        return self

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        logger.info("Server stopped")

    def _log_endpoints(self) -> None:
        for name in self.registry.resource_names():
            base = f"/api/{name}"
            logger.info(
                f"{name} endpoints: GET {base} | GET {base}/{{id}} | POST {base} | "
                f"PUT {base}/{{id}} | DELETE {base}/{{id}}"
            )
        logger.info(f"Try: curl http://localhost:{self.registry.port}/api/{ENTITIES_RESOURCE}")
