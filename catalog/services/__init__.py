# catalog/services/__init__.py
from .orchestrator import (
    MutationOrchestrator, FormRedisplay, Created, Updated, DeleteBlocked, Deleted
)
from .handler import CatalogHandler, View, Redirect

__all__ = [
    'MutationOrchestrator',
    'FormRedisplay',
    'Created',
    'Updated',
    'DeleteBlocked',
    'Deleted',
    'CatalogHandler',
    'View',
    'Redirect'
]
