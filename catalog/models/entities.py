# catalog/models/entities.py

from datetime import date
from enum import Enum
from typing import Any, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field

from catalog.errors import UnknownKind

class EntityKind(str, Enum):
    AUTHOR = "author"
    GENRE = "genre"
    BOOK = "book"
    BOOK_INSTANCE = "bookinstance"

    @classmethod
    def parse(cls, value: Union[str, "EntityKind"]) -> "EntityKind":
        """Resolve a kind from its name, accepting the plural list form"""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name.endswith("s"):
            name = name[:-1]
        try:
            return cls(name)
        except ValueError:
            raise UnknownKind(value)

class BookInstanceStatus(str, Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"

class Entity(BaseModel):
    """Common base for catalog records.

    Identifiers are handled in their canonical string form everywhere
    outside the store, so ``"7"`` and ``7`` name the same record.
    """
    id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

class Author(Entity):
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None

class Genre(Entity):
    name: str

class Book(Entity):
    title: str
    summary: str
    isbn: str
    author: str
    genres: Set[str] = Field(default_factory=set)

class BookInstance(Entity):
    book: str
    imprint: str
    status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE
    due_back: Optional[date] = None

ENTITY_TYPES = {
    EntityKind.AUTHOR: Author,
    EntityKind.GENRE: Genre,
    EntityKind.BOOK: Book,
    EntityKind.BOOK_INSTANCE: BookInstance,
}

def kind_of(entity: Entity) -> EntityKind:
    for kind, entity_type in ENTITY_TYPES.items():
        if isinstance(entity, entity_type):
            return kind
    raise TypeError(f"Not a catalog entity: {type(entity).__name__}")

class FieldError(BaseModel):
    field: str
    message: str

# kind -> (dependent kind, field on the dependent holding the kind's id)
DEPENDENTS = {
    EntityKind.AUTHOR: (EntityKind.BOOK, 'author'),
    EntityKind.GENRE: (EntityKind.BOOK, 'genres'),
    EntityKind.BOOK: (EntityKind.BOOK_INSTANCE, 'book'),
}

def canonical_id(value: Any) -> str:
    """Canonical string form of an identifier, for equality checks"""
    text = str(value).strip()
    if text.isascii() and text.isdecimal():
        return str(int(text))
    return text
