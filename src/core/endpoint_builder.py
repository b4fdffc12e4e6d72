"""
FastAPI Endpoint Builder

Reference implementation of the host endpoint builder. Routes declared by a
plugin are mapped onto a FastAPI APIRouter; plugin handlers stay unaware of
FastAPI, receiving plain values and returning plain values or objects with
a to_dict() method.
"""

import json
import traceback
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .logging import get_logger, log_plugin_error
from .plugin_interfaces import (
    EndpointBuilder,
    EndpointRegistrationError,
    GetHandler,
    PostHandler
)


@dataclass(frozen=True)
class RouteDefinition:
    """A route declared by a plugin"""
    method: str
    path: str
    plugin_id: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.method, self.path)


def to_jsonable(value: Any) -> Any:
    """Convert handler results into JSON-compatible data"""
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return jsonable_encoder(value)


async def read_request_body(request: Request) -> Any:
    """
    Decode a request body without validating it.

    Returns:
        Parsed JSON, the raw text when the body is not JSON, or None when empty
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode('utf-8', errors='replace')


class FastAPIEndpointBuilder(EndpointBuilder):
    """Maps plugin route declarations onto a FastAPI router"""

    def __init__(self, plugin_id: str = "", router: Optional[APIRouter] = None):
        self.plugin_id = plugin_id
        self.router = router or APIRouter()
        self.routes: List[RouteDefinition] = []
        self.logger = get_logger('endpoint_builder')

    def _declare(self, method: str, path: str) -> RouteDefinition:
        if not path.startswith('/'):
            raise EndpointRegistrationError(f"Route path must start with '/': {path}")

        route = RouteDefinition(method=method, path=path, plugin_id=self.plugin_id)
        if any(existing.key == route.key for existing in self.routes):
            raise EndpointRegistrationError(f"Route already declared: {method} {path}")

        self.routes.append(route)
        self.logger.info(f"Mapped {method} {path} for plugin {self.plugin_id or '<host>'}")
        return route

    def _fail(self, route: RouteDefinition, error: Exception):
        log_plugin_error(
            self.logger,
            self.plugin_id,
            type(error).__name__,
            str(error),
            context={'method': route.method, 'path': route.path},
            stack_trace=traceback.format_exc()
        )

    def map_get(self, path: str, handler: GetHandler) -> None:
        route = self._declare("GET", path)

        async def endpoint() -> JSONResponse:
            try:
                result = await handler()
            except Exception as e:
                self._fail(route, e)
                raise
            return JSONResponse(content=to_jsonable(result))

        self.router.add_api_route(path, endpoint, methods=["GET"], name=f"GET {path}")

    def map_post(self, path: str, handler: PostHandler) -> None:
        route = self._declare("POST", path)

        async def endpoint(request: Request) -> JSONResponse:
            body = await read_request_body(request)
            try:
                result = await handler(body)
            except Exception as e:
                self._fail(route, e)
                raise
            return JSONResponse(content=to_jsonable(result))

        self.router.add_api_route(path, endpoint, methods=["POST"], name=f"POST {path}")

    def include_in(self, app: FastAPI) -> None:
        """Mount the declared routes on an application"""
        app.include_router(self.router)
