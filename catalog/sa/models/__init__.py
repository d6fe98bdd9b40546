# catalog/sa/models/__init__.py
from .base import Base, TimestampMixin
from .author import Author
from .genre import Genre
from .book import Book, BookGenre
from .book_instance import BookInstance

__all__ = [
    'Base',
    'TimestampMixin',
    'Author',
    'Genre',
    'Book',
    'BookGenre',
    'BookInstance'
]
