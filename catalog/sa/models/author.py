# catalog/sa/models/author.py
from datetime import date
from sqlalchemy import Integer, String, Date, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class Author(Base, TimestampMixin):
    __tablename__ = 'author'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    books = relationship('Book', back_populates='author', passive_deletes='all')

    __table_args__ = (
        # List view sort key
        Index('idx_author_family_name', 'family_name'),
    )
