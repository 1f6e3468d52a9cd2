"""AsyncAPI 3.0 document generation from a channel registry.

Per registered channel and present direction the generator emits:
- payload / headers schemas under ``components.schemas`` as ``schema_<n>``
- a message under ``components.messages`` as ``<channel>_<direction>_message``
- an operation keyed by the operation id the registry assigned
- one channel object referencing the channel's messages

``schema_<n>`` numbering is local to one call. Only uniqueness and valid
references are meaningful; the numbering order is not.
"""
import hashlib
import json
import logging
from typing import Any, Dict, Optional

from .exceptions import DuplicateOperationError, UnsupportedSchemaError
from .registry import ChannelRegistry
from .translator import translate_schema
from .types import DIRECTIONS, MessageConfig

logger = logging.getLogger(__name__)

ASYNCAPI_VERSION = "3.0.0"


def _ref(pointer: str) -> Dict[str, str]:
    return {"$ref": pointer}


def _compact(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in obj.items() if v is not None}


def _tags(names: Optional[list]) -> Optional[list]:
    if not names:
        return None
    return [{"name": n} for n in names]


class _DocumentBuilder:
    def __init__(self, components: Optional[Dict[str, Any]], strict: bool):
        self.strict = strict
        self.schema_counter = 0
        self.components: Dict[str, Any] = {"schemas": {}, "messages": {}}
        for section, entries in (components or {}).items():
            self.components[section] = dict(entries)

    def add_schema(self, schema: Any, location: str) -> Dict[str, str]:
        key = f"schema_{self.schema_counter}"
        self.schema_counter += 1
        result = translate_schema(schema)
        if not result.complete:
            if self.strict:
                raise UnsupportedSchemaError([f"{location}{p[1:]}" for p in result.unsupported])
            logger.warning(f"{location}: unsupported schema construct(s) rendered as object: {result.unsupported}")
        self.components["schemas"][key] = result.schema
        return _ref(f"#/components/schemas/{key}")

    def add_message(self, key: str, message: MessageConfig) -> Dict[str, str]:
        obj = _compact({
            "contentType": message.content_type,
            "name": message.name,
            "summary": message.summary,
            "description": message.description,
        })
        if message.payload is not None:
            obj["payload"] = self.add_schema(message.payload, f"{key}.payload")
        if message.headers is not None:
            obj["headers"] = self.add_schema(message.headers, f"{key}.headers")
        self.components["messages"][key] = obj
        return _ref(f"#/components/messages/{key}")


def generate_document(
    registry: ChannelRegistry,
    info: Dict[str, Any],
    servers: Optional[Dict[str, Any]] = None,
    components: Optional[Dict[str, Any]] = None,
    strict: bool = False,
) -> Dict[str, Any]:
    """Build an AsyncAPI document for every channel currently in ``registry``.

    Args:
        registry: channels to describe, iterated in registration order
        info: AsyncAPI info object (title and version at least)
        servers: server objects keyed by name; omitted from the output when None
        components: extra component sections merged under ``components``
        strict: raise on unsupported schemas and duplicate operation ids
            instead of logging a warning

    Returns:
        The document as plain dicts, ready for JSON or YAML serialization.
    """
    builder = _DocumentBuilder(components, strict)
    channels: Dict[str, Any] = {}
    operations: Dict[str, Any] = {}

    for channel_id, registered in registry.get_all_channels().items():
        config = registered.config
        channel_messages: Dict[str, Any] = {}
        for direction in DIRECTIONS:
            message = config.message(direction)
            meta = registered.operations.get(direction)
            if message is None or meta is None:
                continue
            message_key = f"{channel_id}_{direction}_message"
            message_ref = builder.add_message(message_key, message)
            channel_messages[message_key] = message_ref

            if meta.operation_id in operations:
                if strict:
                    raise DuplicateOperationError(meta.operation_id)
                logger.warning(f"Duplicate operationId {meta.operation_id}; channel {channel_id} replaces earlier operation")
            operations[meta.operation_id] = _compact({
                "action": direction,
                "channel": _ref(f"#/channels/{channel_id}"),
                "summary": meta.summary,
                "description": meta.description,
                "messages": [message_ref],
                "tags": _tags(meta.tags),
            })

        channels[channel_id] = _compact({
            "address": config.path,
            "description": config.description,
            "messages": {k: dict(v) for k, v in channel_messages.items()},
            "servers": [_ref(f"#/servers/{s}") for s in config.servers] if config.servers else None,
            "tags": _tags(config.tags),
        })

    document: Dict[str, Any] = {"asyncapi": ASYNCAPI_VERSION, "info": dict(info)}
    if servers is not None:
        document["servers"] = servers
    document["channels"] = channels
    document["operations"] = operations
    document["components"] = builder.components
    logger.debug(f"Generated AsyncAPI document: {len(channels)} channel(s), {len(operations)} operation(s)")
    return document


def create_websocket_server(host: str, description: Optional[str] = None) -> Dict[str, Any]:
    return {"host": host, "protocol": "ws", "description": description or "WebSocket server"}


def create_secure_websocket_server(host: str, description: Optional[str] = None) -> Dict[str, Any]:
    return {"host": host, "protocol": "wss", "description": description or "Secure WebSocket server"}


def document_hash(document: Dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form; detects unintended document drift."""
    blob = json.dumps(document, sort_keys=True, separators=(",", ":")).encode()
    return hashlib.sha256(blob).hexdigest()


__all__ = [
    "ASYNCAPI_VERSION",
    "generate_document",
    "create_websocket_server",
    "create_secure_websocket_server",
    "document_hash",
]
