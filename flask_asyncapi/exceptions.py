"""Errors raised only when strict generation is requested.

Lenient mode (the default) never raises; the same conditions are logged.
"""
from typing import Iterable


class AsyncAPIError(Exception):
    pass


class UnsupportedSchemaError(AsyncAPIError):
    def __init__(self, locations: Iterable[str]):
        self.locations = list(locations)
        super().__init__(f"Unsupported schema construct at: {', '.join(self.locations)}")


class DuplicateOperationError(AsyncAPIError):
    def __init__(self, operation_id: str):
        self.operation_id = operation_id
        super().__init__(f"Duplicate operationId {operation_id}")


__all__ = ["AsyncAPIError", "UnsupportedSchemaError", "DuplicateOperationError"]
