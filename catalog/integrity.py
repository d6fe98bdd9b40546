# catalog/integrity.py
from typing import Any, List

from catalog.models import DEPENDENTS, Entity, EntityKind
from catalog.store import EntityStore

class IntegrityEnforcer:
    """Finds the records that would be orphaned by a delete.

    Deletes are cascade-protected: a record with dependents is never
    removed, and the dependents are handed back for display.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def dependents_of(self, kind: EntityKind, entity_id: Any) -> List[Entity]:
        """Authors -> their books, genres -> tagged books, books -> copies"""
        if kind not in DEPENDENTS:
            return []
        dependent_kind, field = DEPENDENTS[kind]
        return self.store.find_where(dependent_kind, field, entity_id)
