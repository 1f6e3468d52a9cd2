"""Channel configuration and registry entry types.

Configurations are authored by the application and never mutated here. The
generated document itself is plain dicts, so it has no types of its own.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

SEND = "send"
RECEIVE = "receive"
DIRECTIONS = (SEND, RECEIVE)

DEFAULT_CONTENT_TYPE = "application/json"

# ``:name`` or ``{name}`` placeholders in a channel path
PATH_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)|\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class MessageConfig:
    """One message direction of a channel.

    ``payload`` and ``headers`` are schemas understood by the translator:
    pydantic models, typing annotations or ready-made schema dicts.
    """
    payload: Any = None
    headers: Any = None
    content_type: str = DEFAULT_CONTENT_TYPE
    name: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ChannelConfig:
    """Declarative description of a WebSocket channel."""
    path: str
    description: Optional[str] = None
    send: Optional[MessageConfig] = None
    receive: Optional[MessageConfig] = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    servers: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    def message(self, direction: str) -> Optional[MessageConfig]:
        return self.send if direction == SEND else self.receive

    def path_parameters(self) -> List[str]:
        """Names of the ``:name`` / ``{name}`` placeholders in ``path``, in order."""
        return [m.group(1) or m.group(2) for m in PATH_PARAM.finditer(self.path)]


@dataclass
class OperationMetadata:
    operation_id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None


@dataclass
class RegisteredChannel:
    config: ChannelConfig
    handler: Optional[Callable[..., Any]] = None
    operations: Dict[str, OperationMetadata] = field(default_factory=dict)


__all__ = [
    "SEND",
    "RECEIVE",
    "DIRECTIONS",
    "DEFAULT_CONTENT_TYPE",
    "PATH_PARAM",
    "MessageConfig",
    "ChannelConfig",
    "OperationMetadata",
    "RegisteredChannel",
]
