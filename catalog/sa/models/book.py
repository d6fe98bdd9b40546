# catalog/sa/models/book.py
from sqlalchemy import Integer, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class BookGenre(Base, TimestampMixin):
    __tablename__ = 'book_genre'

    book_id: Mapped[int] = mapped_column(ForeignKey('book.id'), primary_key=True)
    genre_id: Mapped[int] = mapped_column(ForeignKey('genre.id'), primary_key=True)

    # Relationships
    book = relationship('Book', back_populates='book_genres')
    genre = relationship('Genre', back_populates='book_genres')

    __table_args__ = (
        Index('idx_book_genre_genre_id', 'genre_id'),
    )

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(50), nullable=False)
    author_id: Mapped[int] = mapped_column(ForeignKey('author.id'), nullable=False)

    # Relationships
    author = relationship('Author', back_populates='books')
    book_genres = relationship('BookGenre', back_populates='book', cascade='all, delete-orphan')
    instances = relationship('BookInstance', back_populates='book', passive_deletes='all')

    # Convenience relationship
    genres = relationship('Genre', secondary='book_genre', viewonly=True)

    __table_args__ = (
        Index('idx_book_title', 'title'),
        Index('idx_book_author_id', 'author_id'),
    )
