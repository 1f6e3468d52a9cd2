"""Flask integration: declare WebSocket channels and serve their AsyncAPI document.

    asyncapi = AsyncAPI(info={"title": "Chat", "version": "1.0.0"})
    asyncapi.channel("chat", chat_channel, on_chat)
    asyncapi.doc("/asyncapi.json")
    asyncapi.init_app(app)

Channel routes do not perform the WebSocket handshake. A plain GET is rejected
with 400, a request carrying ``Upgrade: websocket`` with 426; the actual
upgrade belongs to whatever WebSocket server fronts the application.
"""
import re
from typing import Any, Callable, Dict, List, Optional

from flask import Blueprint, Flask, abort, current_app, request
from werkzeug.http import HTTP_STATUS_CODES

from .config import apply_defaults, default_info
from .generator import generate_document
from .registry import ChannelRegistry
from .serialization import to_json, to_yaml
from .types import PATH_PARAM, ChannelConfig

# attributes set on generated view functions, used to keep them out of REST docs
CHANNEL_ATTR = "asyncapi_channel"
DOCUMENT_ATTR = "asyncapi_document"


def flask_path(path: str) -> str:
    """Convert ``/chat/:roomId`` (or ``/chat/{roomId}``) to ``/chat/<roomId>``."""
    return PATH_PARAM.sub(lambda m: f"<{m.group(1) or m.group(2)}>", path)


def _endpoint_name(channel_id: str) -> str:
    return "channel_" + re.sub(r"[^A-Za-z0-9_]", "_", channel_id)


def upgrade_rejection(status: int, detail: str):
    """Error body in the shape used for all channel route failures."""
    payload = {
        "error": {
            "status": status,
            "title": HTTP_STATUS_CODES.get(status, "Unknown Error"),
            "detail": detail,
        }
    }
    headers = {"Upgrade": "websocket", "Connection": "Upgrade"} if status == 426 else {}
    return payload, status, headers


def channel_view(registry: ChannelRegistry, channel_id: str) -> Callable[..., Any]:
    def view(**params):
        entry = registry.get_channel(channel_id)
        # cleared, handler dropped, or re-registered under another path
        if entry is None or entry.handler is None:
            abort(404)
        if request.url_rule is None or not request.url_rule.rule.endswith(flask_path(entry.config.path)):
            abort(404)
        if request.headers.get("Upgrade", "").lower() != "websocket":
            current_app.logger.debug(f"Channel {channel_id}: rejected non-upgrade request")
            return upgrade_rejection(400, "Expected WebSocket connection")
        current_app.logger.debug(f"Channel {channel_id}: upgrade requested but not handled here")
        return upgrade_rejection(426, "WebSocket endpoint - upgrade required")

    view.__name__ = _endpoint_name(channel_id)
    setattr(view, CHANNEL_ATTR, channel_id)
    return view


class _ChannelRoutes:
    """View cache so re-registering a channel id reuses its endpoint."""

    def __init__(self, registry: ChannelRegistry):
        self.registry = registry
        self._views: Dict[str, Callable[..., Any]] = {}

    def view_for(self, channel_id: str) -> Callable[..., Any]:
        if channel_id not in self._views:
            self._views[channel_id] = channel_view(self.registry, channel_id)
        return self._views[channel_id]


class ChannelBlueprint(Blueprint):
    """Blueprint grouping channels; mount it with :meth:`AsyncAPI.register_blueprint`."""

    def __init__(self, name: str, import_name: str, registry: Optional[ChannelRegistry] = None, **kwargs):
        super().__init__(name, import_name, **kwargs)
        self.registry = registry if registry is not None else ChannelRegistry()
        self._routes = _ChannelRoutes(self.registry)

    def channel(self, channel_id: str, config: ChannelConfig, handler: Optional[Callable[..., Any]] = None):
        self.registry.register_channel(channel_id, config, handler)
        if handler is not None:
            self.add_url_rule(
                flask_path(config.path),
                endpoint=_endpoint_name(channel_id),
                view_func=self._routes.view_for(channel_id),
                methods=["GET"],
            )
        return self


class AsyncAPI:
    def __init__(
        self,
        app: Optional[Flask] = None,
        info: Optional[Dict[str, Any]] = None,
        servers: Optional[Dict[str, Any]] = None,
        registry: Optional[ChannelRegistry] = None,
    ):
        self.registry = registry if registry is not None else ChannelRegistry()
        self.info = info
        self.servers = servers
        self.app: Optional[Flask] = None
        self._routes = _ChannelRoutes(self.registry)
        self._deferred: List[Callable[[Flask], None]] = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        apply_defaults(app)
        app.extensions["asyncapi"] = self
        self.app = app
        for fn in self._deferred:
            fn(app)
        self._deferred.clear()

    def _record(self, fn: Callable[[Flask], None]) -> None:
        if self.app is not None:
            fn(self.app)
        else:
            self._deferred.append(fn)

    def channel(self, channel_id: str, config: ChannelConfig, handler: Optional[Callable[..., Any]] = None):
        """Register a channel; bind its route only when a handler is given."""
        self.registry.register_channel(channel_id, config, handler)
        if handler is not None:
            self._record(lambda app: self.bind_channel(app, channel_id))
        return self

    def bind_channel(self, app: Flask, channel_id: str) -> None:
        """Add the route of a registered channel to ``app`` if it has a handler."""
        entry = self.registry.get_channel(channel_id)
        if entry is None or entry.handler is None:
            return
        app.add_url_rule(
            flask_path(entry.config.path),
            endpoint=f"asyncapi.{_endpoint_name(channel_id)}",
            view_func=self._routes.view_for(channel_id),
            methods=["GET"],
        )

    def get_document(
        self,
        info: Optional[Dict[str, Any]] = None,
        servers: Optional[Dict[str, Any]] = None,
        components: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        config = self.app.config if self.app is not None else {}
        return generate_document(
            self.registry,
            info or self.info or default_info(config),
            servers=servers if servers is not None else self.servers,
            components=components,
            strict=bool(config.get("ASYNCAPI_STRICT", False)),
        )

    def _add_document_route(self, path: str, endpoint: str, render: Callable[[], Any]) -> None:
        setattr(render, DOCUMENT_ATTR, True)
        self._record(lambda app: app.add_url_rule(path, endpoint=endpoint, view_func=render, methods=["GET"]))

    def doc(self, path: str, **options):
        """Serve the document as JSON at ``path``."""
        def asyncapi_json():
            return current_app.response_class(to_json(self.get_document(**options)), mimetype="application/json")

        self._add_document_route(path, f"asyncapi.doc:{path}", asyncapi_json)
        return self

    def doc_yaml(self, path: str, **options):
        """Serve the document as YAML at ``path``."""
        def asyncapi_yaml():
            return current_app.response_class(to_yaml(self.get_document(**options)), mimetype="application/yaml")

        self._add_document_route(path, f"asyncapi.doc_yaml:{path}", asyncapi_yaml)
        return self

    def register_blueprint(self, blueprint: ChannelBlueprint, **options):
        """Mount ``blueprint`` and merge its channels into this registry."""
        if blueprint.registry is not self.registry:
            self.registry.merge(blueprint.registry)
        self._record(lambda app: app.register_blueprint(blueprint, **options))
        return self

    def base_path(self, prefix: str, name: Optional[str] = None) -> ChannelBlueprint:
        """Blueprint under ``prefix`` sharing this registry.

        Declare channels on it, then mount it with :meth:`register_blueprint`.
        Channel addresses in the document stay as declared.
        """
        if name is None:
            name = "asyncapi_" + (re.sub(r"[^A-Za-z0-9_]", "_", prefix.strip("/")) or "root")
        return ChannelBlueprint(name, __name__, registry=self.registry, url_prefix=prefix)


__all__ = [
    "AsyncAPI",
    "ChannelBlueprint",
    "CHANNEL_ATTR",
    "DOCUMENT_ATTR",
    "channel_view",
    "flask_path",
    "upgrade_rejection",
]
