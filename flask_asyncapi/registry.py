"""Channel registry: channel id -> configuration, handler and operation metadata.

Operation ids look like ``send_chat_0``; the trailing sequence number comes from
a counter owned by the registry instance and shared by all of its channels.
Ids are unique within one registry until :meth:`ChannelRegistry.clear` resets
the counter. Merging copies ids verbatim and leaves both counters alone, so a
merged registry may hold ids that collide with ones it assigns later.

Registration is expected to happen during application setup; the counter
increment and the insert are not atomic.
"""
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .types import DIRECTIONS, ChannelConfig, OperationMetadata, RegisteredChannel

logger = logging.getLogger(__name__)


class ChannelRegistry:
    def __init__(self):
        self._channels: Dict[str, RegisteredChannel] = {}
        self._counter = 0

    def _next_operation_id(self, direction: str, channel_id: str) -> str:
        operation_id = f"{direction}_{channel_id}_{self._counter}"
        self._counter += 1
        return operation_id

    def register_channel(
        self,
        channel_id: str,
        config: ChannelConfig,
        handler: Optional[Callable[..., Any]] = None,
    ) -> RegisteredChannel:
        """Register (or replace) a channel and assign its operation ids."""
        operations: Dict[str, OperationMetadata] = {}
        for direction in DIRECTIONS:
            message = config.message(direction)
            if message is None:
                continue
            operations[direction] = OperationMetadata(
                operation_id=self._next_operation_id(direction, channel_id),
                summary=message.summary,
                description=message.description,
                tags=config.tags,
            )
        if channel_id in self._channels:
            logger.debug(f"Replacing registered channel: {channel_id}")
        entry = RegisteredChannel(config=config, handler=handler, operations=operations)
        self._channels[channel_id] = entry
        logger.debug(f"Registered channel {channel_id} at {config.path} ({', '.join(operations) or 'no operations'})")
        return entry

    def get_channel(self, channel_id: str) -> Optional[RegisteredChannel]:
        return self._channels.get(channel_id)

    def get_all_channels(self) -> Mapping[str, RegisteredChannel]:
        """Live read-only view in registration order."""
        return MappingProxyType(self._channels)

    def operation_ids(self) -> List[str]:
        return [
            meta.operation_id
            for entry in self._channels.values()
            for meta in entry.operations.values()
        ]

    def clear(self) -> None:
        """Drop every channel and restart operation numbering at zero."""
        self._channels.clear()
        self._counter = 0

    def merge(self, other: "ChannelRegistry") -> None:
        """Copy every channel of ``other`` into this registry, replacing on id collision."""
        for channel_id, entry in list(other.get_all_channels().items()):
            self._channels[channel_id] = entry
        logger.debug(f"Merged {len(other)} channel(s) into registry")

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._channels

    def __iter__(self) -> Iterator[str]:
        return iter(self._channels)


__all__ = ["ChannelRegistry"]
