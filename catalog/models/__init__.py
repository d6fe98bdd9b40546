# catalog/models/__init__.py
from .entities import (
    EntityKind, BookInstanceStatus, Entity, Author, Genre, Book,
    BookInstance, FieldError, ENTITY_TYPES, DEPENDENTS, canonical_id, kind_of
)

__all__ = [
    'EntityKind',
    'BookInstanceStatus',
    'Entity',
    'Author',
    'Genre',
    'Book',
    'BookInstance',
    'FieldError',
    'ENTITY_TYPES',
    'DEPENDENTS',
    'canonical_id',
    'kind_of'
]
