# catalog/composer.py
from typing import Any, Callable, Dict, Iterable, List, Optional

from catalog.concurrency import fan_out
from catalog.display import present
from catalog.errors import NotFound
from catalog.models import (
    DEPENDENTS, BookInstanceStatus, Entity, EntityKind, Genre, canonical_id
)
from catalog.store import EntityStore

LIST_KEYS = {
    EntityKind.AUTHOR: 'author_list',
    EntityKind.GENRE: 'genre_list',
    EntityKind.BOOK: 'book_list',
    EntityKind.BOOK_INSTANCE: 'bookinstance_list',
}

DEPENDENT_KEYS = {
    EntityKind.AUTHOR: 'author_books',
    EntityKind.GENRE: 'genre_books',
    EntityKind.BOOK: 'book_instances',
}

def genre_options(genres: Iterable[Genre], selected: Iterable[Any]) -> List[Dict[str, Any]]:
    """Every genre with a checked flag for the ones in the selection.

    Ids are compared in canonical string form, since a selection may hold
    the same id as an int, a padded string or a stored string.
    """
    chosen = {canonical_id(genre_id) for genre_id in selected or ()}
    return [
        {**present(genre), 'checked': canonical_id(genre.id) in chosen}
        for genre in genres
    ]

def _resolve(data: Dict[str, Any], field: str, target: Optional[Entity]) -> Dict[str, Any]:
    """Replace a reference id with the referenced record, keeping the id"""
    data[f'{field}_id'] = data.get(field)
    data[field] = present(target) if target is not None else None
    return data

class ReadModelComposer:
    """Builds the joined, read-only views shown by the catalog pages.

    Independent store reads for one view are fanned out concurrently and
    joined before anything is returned.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def _index(self, kind: EntityKind) -> Callable[[], Dict[str, Entity]]:
        def load() -> Dict[str, Entity]:
            return {canonical_id(e.id): e for e in self.store.find_all(kind)}
        return load

    def compose_list(self, kind: EntityKind) -> Dict[str, Any]:
        """List view in the kind's sort order. Books carry their author, copies their book."""
        if kind is EntityKind.BOOK:
            results = fan_out({
                'books': lambda: self.store.find_all(EntityKind.BOOK),
                'authors': self._index(EntityKind.AUTHOR),
            })
            items = [
                _resolve(present(book), 'author', results['authors'].get(canonical_id(book.author)))
                for book in results['books']
            ]
        elif kind is EntityKind.BOOK_INSTANCE:
            results = fan_out({
                'instances': lambda: self.store.find_all(EntityKind.BOOK_INSTANCE),
                'books': self._index(EntityKind.BOOK),
            })
            items = [
                _resolve(present(instance), 'book', results['books'].get(canonical_id(instance.book)))
                for instance in results['instances']
            ]
        else:
            items = [present(entity) for entity in self.store.find_all(kind)]
        return {LIST_KEYS[kind]: items}

    def compose_detail(self, kind: EntityKind, entity_id: Any) -> Dict[str, Any]:
        """Record plus its dependents and resolved references.

        Raises:
            NotFound: If the record does not exist
        """
        branches = {'entity': lambda: self.store.find_by_id(kind, entity_id)}
        if kind in DEPENDENTS:
            dependent_kind, field = DEPENDENTS[kind]
            branches['dependents'] = lambda: self.store.find_where(dependent_kind, field, entity_id)
        if kind is EntityKind.BOOK:
            branches['genres'] = lambda: self.store.find_all(EntityKind.GENRE)
        results = fan_out(branches)

        entity = results['entity']
        if entity is None:
            raise NotFound(kind, entity_id)

        view = present(entity)
        context: Dict[str, Any] = {kind.value: view}
        if kind in DEPENDENT_KEYS:
            context[DEPENDENT_KEYS[kind]] = [present(d) for d in results['dependents']]

        if kind is EntityKind.BOOK:
            _resolve(view, 'author', self.store.find_by_id(EntityKind.AUTHOR, entity.author))
            wanted = {canonical_id(genre_id) for genre_id in entity.genres}
            view['genres'] = [present(g) for g in results['genres'] if canonical_id(g.id) in wanted]
        elif kind is EntityKind.BOOK_INSTANCE:
            _resolve(view, 'book', self.store.find_by_id(EntityKind.BOOK, entity.book))
        return context

    def compose_delete(self, kind: EntityKind, entity_id: Any) -> Optional[Dict[str, Any]]:
        """Delete confirmation view, or None when the record is already gone"""
        branches = {'entity': lambda: self.store.find_by_id(kind, entity_id)}
        if kind in DEPENDENTS:
            dependent_kind, field = DEPENDENTS[kind]
            branches['dependents'] = lambda: self.store.find_where(dependent_kind, field, entity_id)
        results = fan_out(branches)

        if results['entity'] is None:
            return None
        context: Dict[str, Any] = {kind.value: present(results['entity'])}
        if kind in DEPENDENT_KEYS:
            context[DEPENDENT_KEYS[kind]] = [present(d) for d in results['dependents']]
        return context

    def _lookup_branches(self, kind: EntityKind) -> Dict[str, Callable[[], Any]]:
        if kind is EntityKind.BOOK:
            return {
                'authors': lambda: self.store.find_all(EntityKind.AUTHOR),
                'genres': lambda: self.store.find_all(EntityKind.GENRE),
            }
        if kind is EntityKind.BOOK_INSTANCE:
            return {'books': lambda: self.store.find_all(EntityKind.BOOK)}
        return {}

    def _form(self, kind: EntityKind, existing: Optional[Entity], lookups: Dict[str, Any]) -> Dict[str, Any]:
        context: Dict[str, Any] = {}
        if existing is not None:
            context[kind.value] = present(existing)
        if 'authors' in lookups:
            context['authors'] = [present(a) for a in lookups['authors']]
        if 'genres' in lookups:
            selected = getattr(existing, 'genres', None) or ()
            context['genres'] = genre_options(lookups['genres'], selected)
        if 'books' in lookups:
            context['books'] = [present(b) for b in lookups['books']]
        return context

    def compose_form_context(self, kind: EntityKind, existing: Optional[Entity] = None) -> Dict[str, Any]:
        """Form view: the record being edited (if any) and the lookup lists it needs"""
        return self._form(kind, existing, fan_out(self._lookup_branches(kind)))

    def compose_update_form(self, kind: EntityKind, entity_id: Any) -> Dict[str, Any]:
        """Form view for an existing record, loaded together with the lookups.

        Raises:
            NotFound: If the record does not exist
        """
        branches = self._lookup_branches(kind)
        branches['entity'] = lambda: self.store.find_by_id(kind, entity_id)
        results = fan_out(branches)
        existing = results.pop('entity')
        if existing is None:
            raise NotFound(kind, entity_id)
        return self._form(kind, existing, results)

    def compose_dashboard(self) -> Dict[str, int]:
        """Record counts for the home page. Fails as a whole if any count fails."""
        return fan_out({
            'book_count': lambda: self.store.count(EntityKind.BOOK),
            'book_instance_count': lambda: self.store.count(EntityKind.BOOK_INSTANCE),
            'book_instance_available_count': lambda: self.store.count(
                EntityKind.BOOK_INSTANCE, {'status': BookInstanceStatus.AVAILABLE}
            ),
            'author_count': lambda: self.store.count(EntityKind.AUTHOR),
            'genre_count': lambda: self.store.count(EntityKind.GENRE),
        })
