"""REST + WebSocket documentation side by side.

``UnifiedAPI`` is a single extension serving both documents for one app.
``merge_api_docs`` attaches an existing :class:`AsyncAPI` to a foreign Flask
app (with its own route table and, optionally, its own OpenAPI builder).
Neither copies nor renames operation ids; route collisions between the REST
paths and channel paths are left to the caller.
"""
from typing import Any, Callable, Dict, Optional

from flask import Flask, current_app

from .extension import DOCUMENT_ATTR, AsyncAPI
from .openapi import build_openapi_spec
from .registry import ChannelRegistry
from .serialization import to_json
from .types import ChannelConfig


def _json_route(app: Flask, path: str, endpoint: str, build: Callable[[], Dict[str, Any]]) -> None:
    def view():
        return current_app.response_class(to_json(build()), mimetype="application/json")

    setattr(view, DOCUMENT_ATTR, True)
    app.add_url_rule(path, endpoint=endpoint, view_func=view, methods=["GET"])


class UnifiedAPI(AsyncAPI):
    """AsyncAPI extension that also describes the app's REST routes."""

    def __init__(
        self,
        app: Optional[Flask] = None,
        openapi: Optional[Dict[str, Any]] = None,
        asyncapi: Optional[Dict[str, Any]] = None,
    ):
        self.openapi_options: Dict[str, Any] = dict(openapi or {})
        super().__init__(app, **(asyncapi or {}))

    def get_openapi_document(self) -> Dict[str, Any]:
        return build_openapi_spec(
            self.app or current_app,
            info=self.openapi_options.get("info"),
            servers=self.openapi_options.get("servers"),
        )

    def get_asyncapi_document(self, **options) -> Dict[str, Any]:
        return self.get_document(**options)

    def docs(self, openapi_path: str, asyncapi_path: str):
        self.doc(asyncapi_path)
        self._record(lambda app: _json_route(app, openapi_path, f"openapi.doc:{openapi_path}", self.get_openapi_document))
        return self


class MergedAPI:
    """A Flask app and an AsyncAPI extension exposed as one documented API."""

    def __init__(
        self,
        app: Flask,
        asyncapi: AsyncAPI,
        openapi_builder: Optional[Callable[[], Dict[str, Any]]] = None,
    ):
        self.app = app
        self.asyncapi = asyncapi
        self._openapi_builder = openapi_builder

    @property
    def registry(self) -> ChannelRegistry:
        return self.asyncapi.registry

    def get_openapi_document(self) -> Dict[str, Any]:
        if self._openapi_builder is not None:
            return self._openapi_builder()
        return build_openapi_spec(self.app)

    def get_asyncapi_document(self, **options) -> Dict[str, Any]:
        return self.asyncapi.get_document(**options)

    def channel(self, channel_id: str, config: ChannelConfig, handler: Optional[Callable[..., Any]] = None):
        self.asyncapi.channel(channel_id, config, handler)
        if handler is not None and self.asyncapi.app is not self.app:
            self.asyncapi.bind_channel(self.app, channel_id)
        return self

    def openapi_doc(self, path: str):
        _json_route(self.app, path, f"openapi.doc:{path}", self.get_openapi_document)
        return self

    def asyncapi_doc(self, path: str, **options):
        _json_route(self.app, path, f"asyncapi.doc:{path}", lambda: self.get_asyncapi_document(**options))
        return self


def merge_api_docs(
    app: Flask,
    asyncapi: AsyncAPI,
    openapi_builder: Optional[Callable[[], Dict[str, Any]]] = None,
) -> MergedAPI:
    """Combine ``app``'s REST routes with the channels of ``asyncapi``.

    An unbound ``asyncapi`` is initialised on ``app``; one already bound to
    another app gets its channel routes added to ``app`` as well.
    """
    if asyncapi.app is None:
        asyncapi.init_app(app)
    elif asyncapi.app is not app:
        for channel_id in asyncapi.registry:
            asyncapi.bind_channel(app, channel_id)
    return MergedAPI(app, asyncapi, openapi_builder)


def create_unified_info(
    title: str,
    version: str,
    description: Optional[str] = None,
    contact: Optional[Dict[str, Any]] = None,
    license: Optional[Dict[str, Any]] = None,
) -> Dict[str, Dict[str, Any]]:
    base = {
        "title": title,
        "version": version,
        "description": description,
        "contact": contact,
        "license": license,
    }
    base = {k: v for k, v in base.items() if v is not None}
    return {"openapi": dict(base), "asyncapi": dict(base)}


def create_unified_servers(
    http: Optional[Dict[str, Any]] = None,
    ws: Optional[Dict[str, Any]] = None,
) -> Dict[str, Dict[str, Any]]:
    """Server maps for both documents.

    ``http`` takes ``url`` and ``description``; ``ws`` takes ``host``,
    ``protocol`` (``ws``/``wss``) and ``description``.
    """
    openapi: Dict[str, Any] = {}
    asyncapi: Dict[str, Any] = {}
    if http:
        openapi["default"] = {
            "url": http["url"],
            "description": http.get("description") or "HTTP server",
        }
    if ws:
        asyncapi["default"] = {
            "host": ws["host"],
            "protocol": ws.get("protocol", "ws"),
            "description": ws.get("description") or "WebSocket server",
        }
    return {"openapi": openapi, "asyncapi": asyncapi}


__all__ = [
    "UnifiedAPI",
    "MergedAPI",
    "merge_api_docs",
    "create_unified_info",
    "create_unified_servers",
]
