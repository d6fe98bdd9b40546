# catalog/services/orchestrator.py
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from catalog.composer import ReadModelComposer
from catalog.concurrency import fan_out
from catalog.integrity import IntegrityEnforcer
from catalog.models import Entity, EntityKind, FieldError, canonical_id
from catalog.store import EntityStore
from catalog.validation import ValidationResult, validate

logger = logging.getLogger(__name__)

class FormRedisplay(NamedTuple):
    """Rejected submission: show the form again with the user's input"""
    kind: EntityKind
    form: Dict[str, Any]
    draft: Entity
    errors: List[FieldError]

class Created(NamedTuple):
    entity: Entity
    created: bool

class Updated(NamedTuple):
    entity: Entity

class DeleteBlocked(NamedTuple):
    """Delete refused because other records still reference the target"""
    kind: EntityKind
    entity: Optional[Entity]
    dependents: List[Entity]

class Deleted(NamedTuple):
    kind: EntityKind
    entity_id: Any
    existed: bool

class MutationOrchestrator:
    """Runs the create, update and delete flows for every entity kind.

    Each flow is a strict sequence (validate, look up or check dependents,
    write) and stops at the first stage that fails. Validation failures and
    blocked deletes come back as results; NotFound and StoreError are raised.
    """

    def __init__(self, store: EntityStore,
                 composer: Optional[ReadModelComposer] = None,
                 enforcer: Optional[IntegrityEnforcer] = None):
        self.store = store
        self.composer = composer or ReadModelComposer(store)
        self.enforcer = enforcer or IntegrityEnforcer(store)

    def _redisplay(self, kind: EntityKind, result: ValidationResult) -> FormRedisplay:
        form = self.composer.compose_form_context(kind, result.normalized)
        return FormRedisplay(kind, form, result.normalized, result.errors)

    def _genre_named(self, name: str) -> Optional[Entity]:
        matches = self.store.find_where(EntityKind.GENRE, 'name', name)
        return matches[0] if matches else None

    def create(self, kind: EntityKind, raw_fields: Any) -> Any:
        """Validate and store a new record.

        Genres are deduplicated by name: submitting an existing name hands
        back the stored genre with created=False instead of a duplicate.

        Returns:
            Created, or FormRedisplay when validation fails
        """
        kind = EntityKind.parse(kind)
        result = validate(kind, raw_fields)
        if not result.ok:
            return self._redisplay(kind, result)

        draft = result.normalized
        if kind is EntityKind.GENRE:
            existing = self._genre_named(draft.name)
            if existing is not None:
                logger.info("Genre %r already exists as %s", draft.name, existing.id)
                return Created(existing, created=False)

        return Created(self.store.save(draft), created=True)

    def update(self, kind: EntityKind, entity_id: Any, raw_fields: Any) -> Any:
        """Validate and replace every field of an existing record.

        Returns:
            Updated, or FormRedisplay (draft carrying entity_id) when validation fails

        Raises:
            NotFound: If the record does not exist; it is never created
        """
        kind = EntityKind.parse(kind)
        result = validate(kind, raw_fields, entity_id=entity_id)
        if not result.ok:
            return self._redisplay(kind, result)

        draft = result.normalized
        if kind is EntityKind.GENRE:
            other = self._genre_named(draft.name)
            if other is not None and canonical_id(other.id) != canonical_id(entity_id):
                errors = [FieldError(field='name', message='Genre name already exists')]
                return self._redisplay(kind, ValidationResult(draft, errors))

        return Updated(self.store.update_by_id(kind, entity_id, draft))

    def delete(self, kind: EntityKind, entity_id: Any) -> Any:
        """Delete a record unless other records reference it.

        The dependents check and the delete are separate store calls with
        no transaction around them.

        Returns:
            DeleteBlocked with the dependents, or Deleted (existed=False when
            the record was already absent)
        """
        kind = EntityKind.parse(kind)
        results = fan_out({
            'entity': lambda: self.store.find_by_id(kind, entity_id),
            'dependents': lambda: self.enforcer.dependents_of(kind, entity_id),
        })
        if results['dependents']:
            logger.info("Refusing to delete %s %s: %d dependents",
                        kind.value, entity_id, len(results['dependents']))
            return DeleteBlocked(kind, results['entity'], results['dependents'])

        existed = self.store.delete_by_id(kind, entity_id)
        if not existed:
            logger.info("%s %s already deleted", kind.value.capitalize(), entity_id)
        return Deleted(kind, entity_id, existed)
