# catalog/sa/models/book_instance.py
from datetime import date
from sqlalchemy import Integer, String, Date, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class BookInstance(Base, TimestampMixin):
    """A physical copy of a book that can be borrowed"""
    __tablename__ = 'bookinstance'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id'), nullable=False)
    imprint: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='Maintenance')
    due_back: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    book = relationship('Book', back_populates='instances')

    __table_args__ = (
        Index('idx_bookinstance_book_id', 'book_id'),
        Index('idx_bookinstance_status', 'status'),
    )
