# catalog/store.py
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from catalog.models import Entity, EntityKind

DEFAULT_SORT_KEYS = {
    EntityKind.AUTHOR: 'family_name',
    EntityKind.GENRE: 'name',
    EntityKind.BOOK: 'title',
    EntityKind.BOOK_INSTANCE: 'id',
}

class EntityStore(ABC):
    """Typed CRUD and query primitives over the four catalog collections.

    Implementations hold no business rules. Every persistence failure is
    raised as ``StoreError``; absent records are reported as ``None``
    (reads), ``NotFound`` (updates) or ``False`` (deletes).
    """

    @abstractmethod
    def find_by_id(self, kind: EntityKind, entity_id: Any) -> Optional[Entity]:
        """Get a single record, or None if it does not exist"""

    @abstractmethod
    def find_all(self, kind: EntityKind, sort_key: Optional[str] = None) -> List[Entity]:
        """Get every record of a kind ordered by sort_key, then by id.

        When sort_key is None the kind's list-view key is used.
        """

    @abstractmethod
    def find_where(self, kind: EntityKind, field: str, value: Any) -> List[Entity]:
        """Get records whose field equals value.

        For multi-valued fields (Book.genres) a record matches when the
        value is a member of the field.
        """

    @abstractmethod
    def count(self, kind: EntityKind, predicate: Optional[Mapping[str, Any]] = None) -> int:
        """Count records, optionally restricted to field == value pairs"""

    @abstractmethod
    def save(self, entity: Entity) -> Entity:
        """Insert a new record and return it with its assigned id"""

    @abstractmethod
    def update_by_id(self, kind: EntityKind, entity_id: Any, entity: Entity) -> Entity:
        """Replace every field of an existing record. Raises NotFound."""

    @abstractmethod
    def delete_by_id(self, kind: EntityKind, entity_id: Any) -> bool:
        """Delete a record. Returns False if it was already absent."""
