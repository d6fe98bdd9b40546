# catalog/sa/store.py
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from catalog import models as entities
from catalog.errors import NotFound, StoreError
from catalog.models import Entity, EntityKind, kind_of
from catalog.store import DEFAULT_SORT_KEYS, EntityStore
from .database import Database
from .models import Author, Genre, Book, BookGenre, BookInstance

logger = logging.getLogger(__name__)

MODELS = {
    EntityKind.AUTHOR: Author,
    EntityKind.GENRE: Genre,
    EntityKind.BOOK: Book,
    EntityKind.BOOK_INSTANCE: BookInstance,
}

# Entity fields holding another record's id, and the column behind them
REFERENCE_COLUMNS = {
    EntityKind.BOOK: {'author': 'author_id'},
    EntityKind.BOOK_INSTANCE: {'book': 'book_id'},
}

def coerce_id(value: Any) -> Optional[int]:
    """Convert an identifier in any representation to its stored integer form.

    Returns None for values that cannot name a stored record.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if value is None:
        return None
    text = str(value).strip()
    if text.isascii() and text.isdecimal():
        return int(text)
    return None

def to_entity(kind: EntityKind, row: Any) -> Entity:
    """Map a mapped row to its catalog entity"""
    if kind is EntityKind.AUTHOR:
        return entities.Author(
            id=str(row.id),
            first_name=row.first_name,
            family_name=row.family_name,
            date_of_birth=row.date_of_birth,
            date_of_death=row.date_of_death
        )
    if kind is EntityKind.GENRE:
        return entities.Genre(id=str(row.id), name=row.name)
    if kind is EntityKind.BOOK:
        return entities.Book(
            id=str(row.id),
            title=row.title,
            summary=row.summary,
            isbn=row.isbn,
            author=str(row.author_id),
            genres={str(bg.genre_id) for bg in row.book_genres}
        )
    return entities.BookInstance(
        id=str(row.id),
        book=str(row.book_id),
        imprint=row.imprint,
        status=row.status,
        due_back=row.due_back
    )

class SqlEntityStore(EntityStore):
    """Entity store backed by SQLAlchemy.

    Every call runs in its own session, so independent calls are safe to
    issue from several threads at once.
    """

    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.database.get_db() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Store operation failed: %s", e)
            raise StoreError(str(e)) from e

    def _query(self, session: Session, kind: EntityKind) -> Query:
        query = session.query(MODELS[kind])
        if kind is EntityKind.BOOK:
            query = query.options(selectinload(Book.book_genres))
        return query

    def _column(self, kind: EntityKind, field: str):
        model = MODELS[kind]
        name = REFERENCE_COLUMNS.get(kind, {}).get(field, field)
        if name not in model.__table__.columns:
            raise ValueError(f"Unknown field {field!r} for {kind.value}")
        return getattr(model, name)

    def _filter(self, query: Query, kind: EntityKind, field: str, value: Any) -> Optional[Query]:
        """Apply field == value to a query. Returns None when nothing can match."""
        if kind is EntityKind.BOOK and field == 'genres':
            genre_id = coerce_id(value)
            if genre_id is None:
                return None
            return query.join(Book.book_genres).filter(BookGenre.genre_id == genre_id)

        column = self._column(kind, field)
        if field == 'id' or field in REFERENCE_COLUMNS.get(kind, {}):
            value = coerce_id(value)
            if value is None:
                return None
        else:
            value = getattr(value, 'value', value)
        return query.filter(column == value)

    def _reference(self, value: Any, label: str) -> int:
        row_id = coerce_id(value)
        if row_id is None:
            raise StoreError(f"Invalid {label} reference: {value!r}")
        return row_id

    def _apply(self, kind: EntityKind, row: Any, entity: Entity) -> None:
        """Copy every field of an entity onto a row (full replacement)"""
        if kind is EntityKind.AUTHOR:
            row.first_name = entity.first_name
            row.family_name = entity.family_name
            row.date_of_birth = entity.date_of_birth
            row.date_of_death = entity.date_of_death
        elif kind is EntityKind.GENRE:
            row.name = entity.name
        elif kind is EntityKind.BOOK:
            row.title = entity.title
            row.summary = entity.summary
            row.isbn = entity.isbn
            row.author_id = self._reference(entity.author, 'author')

            wanted = {self._reference(genre_id, 'genre') for genre_id in entity.genres}
            for book_genre in list(row.book_genres):
                if book_genre.genre_id not in wanted:
                    row.book_genres.remove(book_genre)
            current = {bg.genre_id for bg in row.book_genres}
            for genre_id in sorted(wanted - current):
                row.book_genres.append(BookGenre(genre_id=genre_id))
        else:
            row.book_id = self._reference(entity.book, 'book')
            row.imprint = entity.imprint
            row.status = getattr(entity.status, 'value', entity.status)
            row.due_back = entity.due_back

    def find_by_id(self, kind: EntityKind, entity_id: Any) -> Optional[Entity]:
        row_id = coerce_id(entity_id)
        if row_id is None:
            return None
        with self._session() as session:
            row = self._query(session, kind).filter(MODELS[kind].id == row_id).first()
            return to_entity(kind, row) if row else None

    def find_all(self, kind: EntityKind, sort_key: Optional[str] = None) -> List[Entity]:
        sort_column = self._column(kind, sort_key or DEFAULT_SORT_KEYS[kind])
        with self._session() as session:
            rows = (self._query(session, kind)
                    .order_by(sort_column, MODELS[kind].id)
                    .all())
            return [to_entity(kind, row) for row in rows]

    def find_where(self, kind: EntityKind, field: str, value: Any) -> List[Entity]:
        with self._session() as session:
            query = self._filter(self._query(session, kind), kind, field, value)
            if query is None:
                return []
            rows = query.order_by(MODELS[kind].id).all()
            return [to_entity(kind, row) for row in rows]

    def count(self, kind: EntityKind, predicate: Optional[Mapping[str, Any]] = None) -> int:
        with self._session() as session:
            query = session.query(MODELS[kind])
            for field, value in (predicate or {}).items():
                query = self._filter(query, kind, field, value)
                if query is None:
                    return 0
            return query.count()

    def save(self, entity: Entity) -> Entity:
        kind = kind_of(entity)
        with self._session() as session:
            row = MODELS[kind]()
            self._apply(kind, row, entity)
            session.add(row)
            session.flush()
            saved = to_entity(kind, row)
        logger.info("Created %s %s", kind.value, saved.id)
        return saved

    def update_by_id(self, kind: EntityKind, entity_id: Any, entity: Entity) -> Entity:
        row_id = coerce_id(entity_id)
        with self._session() as session:
            row = None
            if row_id is not None:
                row = self._query(session, kind).filter(MODELS[kind].id == row_id).first()
            if row is None:
                raise NotFound(kind, entity_id)
            self._apply(kind, row, entity)
            session.flush()
            updated = to_entity(kind, row)
        logger.info("Updated %s %s", kind.value, updated.id)
        return updated

    def delete_by_id(self, kind: EntityKind, entity_id: Any) -> bool:
        row_id = coerce_id(entity_id)
        if row_id is None:
            return False
        with self._session() as session:
            row = session.get(MODELS[kind], row_id)
            if row is None:
                return False
            session.delete(row)
        logger.info("Deleted %s %s", kind.value, row_id)
        return True
