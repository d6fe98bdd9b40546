# catalog/sa/__init__.py
from .database import Database
from .models import Base, Author, Genre, Book, BookGenre, BookInstance
from .store import SqlEntityStore

__all__ = [
    'Database',
    'SqlEntityStore',
    'Base',
    'Author',
    'Genre',
    'Book',
    'BookGenre',
    'BookInstance'
]
