# api/schemas/__init__.py
from .view import ViewResponse

__all__ = ['ViewResponse']
