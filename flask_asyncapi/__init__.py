"""AsyncAPI 3.0 documentation for WebSocket channels in Flask applications.

Channels are declared with pydantic payload schemas, collected in a registry
and compiled on demand into an AsyncAPI document that can be served next to
the app's OpenAPI description.
"""

from .exceptions import AsyncAPIError, DuplicateOperationError, UnsupportedSchemaError
from .extension import AsyncAPI, ChannelBlueprint
from .generator import (
    ASYNCAPI_VERSION,
    create_secure_websocket_server,
    create_websocket_server,
    document_hash,
    generate_document,
)
from .integration import (
    MergedAPI,
    UnifiedAPI,
    create_unified_info,
    create_unified_servers,
    merge_api_docs,
)
from .openapi import build_openapi_spec
from .registry import ChannelRegistry
from .serialization import to_json, to_yaml
from .translator import SchemaKind, Translation, classify, translate, translate_schema
from .types import ChannelConfig, MessageConfig, OperationMetadata, RegisteredChannel

__version__ = "0.1.0"

__all__ = [
    "AsyncAPI",
    "ChannelBlueprint",
    "UnifiedAPI",
    "MergedAPI",
    "merge_api_docs",
    "create_unified_info",
    "create_unified_servers",
    "ChannelRegistry",
    "ChannelConfig",
    "MessageConfig",
    "OperationMetadata",
    "RegisteredChannel",
    "ASYNCAPI_VERSION",
    "generate_document",
    "create_websocket_server",
    "create_secure_websocket_server",
    "document_hash",
    "build_openapi_spec",
    "to_json",
    "to_yaml",
    "SchemaKind",
    "Translation",
    "classify",
    "translate",
    "translate_schema",
    "AsyncAPIError",
    "UnsupportedSchemaError",
    "DuplicateOperationError",
]
