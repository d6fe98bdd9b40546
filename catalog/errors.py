# catalog/errors.py
from typing import Any

class CatalogError(Exception):
    """Base class for catalog failures that escape a request"""

class NotFound(CatalogError):
    """The requested record does not exist"""

    def __init__(self, kind: Any, entity_id: Any):
        self.kind = getattr(kind, 'value', kind)
        self.entity_id = entity_id
        super().__init__(f"{str(self.kind).capitalize()} not found: {entity_id}")

class StoreError(CatalogError):
    """Underlying persistence failure. Never retried."""

class UnknownKind(CatalogError, ValueError):
    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unknown entity kind: {kind!r}")

class UnknownOperation(CatalogError, ValueError):
    def __init__(self, operation: Any):
        self.operation = operation
        super().__init__(f"Unknown operation: {operation!r}")
