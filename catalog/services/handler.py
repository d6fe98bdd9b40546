# catalog/services/handler.py
import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Union

from catalog.composer import DEPENDENT_KEYS, ReadModelComposer
from catalog.display import list_url, present, url_for
from catalog.errors import StoreError, UnknownOperation
from catalog.models import EntityKind
from catalog.store import EntityStore
from .orchestrator import DeleteBlocked, FormRedisplay, MutationOrchestrator

logger = logging.getLogger(__name__)

OPERATIONS = (
    'list', 'detail',
    'create_get', 'create_post',
    'update_get', 'update_post',
    'delete_get', 'delete_post',
)

LABELS = {
    EntityKind.AUTHOR: 'Author',
    EntityKind.GENRE: 'Genre',
    EntityKind.BOOK: 'Book',
    EntityKind.BOOK_INSTANCE: 'BookInstance',
}

class View(NamedTuple):
    view: str
    context: Dict[str, Any]

class Redirect(NamedTuple):
    path: str

Response = Union[View, Redirect]

class CatalogHandler:
    """Single entry point for the routing layer.

    One call per user action. Returns a view name with its context, or a
    redirect path; NotFound and StoreError propagate to the caller.
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self.composer = ReadModelComposer(store)
        self.orchestrator = MutationOrchestrator(store, composer=self.composer)

    def handle(self, operation: str, kind: Optional[Union[EntityKind, str]] = None,
               params: Optional[Mapping[str, Any]] = None,
               raw_fields: Optional[Mapping[str, Any]] = None) -> Response:
        """Dispatch one catalog action.

        Args:
            operation: 'index' or one of OPERATIONS
            kind: Entity kind, singular or plural name (ignored for 'index')
            params: Route parameters; 'id' names the target record
            raw_fields: Submitted form fields for the *_post operations

        Returns:
            View or Redirect

        Raises:
            UnknownOperation: If operation is not recognised
            UnknownKind: If kind is not an entity kind
            NotFound: If a detail or update target does not exist
            StoreError: If the store fails
        """
        if operation == 'index':
            return self.index()
        if operation not in OPERATIONS:
            raise UnknownOperation(operation)
        kind = EntityKind.parse(kind)
        entity_id = (params or {}).get('id')
        return getattr(self, f'_{operation}')(kind, entity_id, raw_fields or {})

    def index(self) -> View:
        try:
            data, error = self.composer.compose_dashboard(), None
        except StoreError as e:
            logger.error("Dashboard counts failed: %s", e)
            data, error = None, str(e)
        return View('index', {'title': 'Local Library Home', 'error': error, 'data': data})

    def _form_view(self, kind: EntityKind, title: str, context: Dict[str, Any]) -> View:
        return View(f'{kind.value}_form', {'title': title, **context})

    def _redisplay(self, title: str, outcome: FormRedisplay) -> View:
        errors = [{'field': e.field, 'message': e.message} for e in outcome.errors]
        return self._form_view(outcome.kind, title, {**outcome.form, 'errors': errors})

    def _list(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> View:
        return View(f'{kind.value}_list', {
            'title': f'{LABELS[kind]} List',
            **self.composer.compose_list(kind)
        })

    def _detail(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> View:
        context = self.composer.compose_detail(kind, entity_id)
        if kind is EntityKind.BOOK:
            title = context['book']['title']
        elif kind is EntityKind.BOOK_INSTANCE:
            book = context['bookinstance']['book']
            title = f"Copy: {book['title']}" if book else 'Copy'
        else:
            title = f'{LABELS[kind]} Detail'
        return View(f'{kind.value}_detail', {'title': title, **context})

    def _create_get(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> View:
        return self._form_view(kind, f'Create {LABELS[kind]}', self.composer.compose_form_context(kind))

    def _create_post(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> Response:
        outcome = self.orchestrator.create(kind, raw_fields)
        if isinstance(outcome, FormRedisplay):
            return self._redisplay(f'Create {LABELS[kind]}', outcome)
        return Redirect(url_for(kind, outcome.entity.id))

    def _update_get(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> View:
        return self._form_view(kind, f'Update {LABELS[kind]}', self.composer.compose_update_form(kind, entity_id))

    def _update_post(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> Response:
        outcome = self.orchestrator.update(kind, entity_id, raw_fields)
        if isinstance(outcome, FormRedisplay):
            return self._redisplay(f'Update {LABELS[kind]}', outcome)
        return Redirect(url_for(kind, outcome.entity.id))

    def _delete_get(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> Response:
        context = self.composer.compose_delete(kind, entity_id)
        if context is None:
            return Redirect(list_url(kind))
        return View(f'{kind.value}_delete', {'title': f'Delete {LABELS[kind]}', **context})

    def _delete_post(self, kind: EntityKind, entity_id: Any, raw_fields: Mapping[str, Any]) -> Response:
        outcome = self.orchestrator.delete(kind, entity_id)
        if isinstance(outcome, DeleteBlocked):
            context = {
                'title': f'Delete {LABELS[kind]}',
                kind.value: present(outcome.entity) if outcome.entity is not None else None,
                DEPENDENT_KEYS[kind]: [present(d) for d in outcome.dependents],
            }
            return View(f'{kind.value}_delete', context)
        return Redirect(list_url(kind))
