# tests/conftest.py
import os
import sys
import pytest
from datetime import date
from pathlib import Path
from sqlalchemy.sql import text

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from catalog.models import Author, Book, BookInstance, Genre
from catalog.sa import Database, SqlEntityStore
from catalog.services import CatalogHandler, MutationOrchestrator

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_library.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_all()
    db.init_db()

    yield db

    db.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass  # Ignore errors if file doesn't exist

@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Clean up database tables before each test"""
    # Delete all data from tables in reverse order of dependencies
    with database.get_db() as session:
        session.execute(text("DELETE FROM bookinstance"))
        session.execute(text("DELETE FROM book_genre"))
        session.execute(text("DELETE FROM book"))
        session.execute(text("DELETE FROM author"))
        session.execute(text("DELETE FROM genre"))
    yield

@pytest.fixture
def store(database):
    return SqlEntityStore(database)

@pytest.fixture
def orchestrator(store):
    return MutationOrchestrator(store)

@pytest.fixture
def handler(store):
    return CatalogHandler(store)

@pytest.fixture
def sample_author(store):
    """Create a sample author for testing."""
    return store.save(Author(
        first_name="Jane",
        family_name="Austen",
        date_of_birth=date(1775, 12, 16),
        date_of_death=date(1817, 7, 18)
    ))

@pytest.fixture
def sample_genres(store):
    """Create two sample genres for testing."""
    return [store.save(Genre(name="Fiction")), store.save(Genre(name="Romance"))]

@pytest.fixture
def sample_book(store, sample_author, sample_genres):
    """Create a sample book by the sample author, tagged with the first genre."""
    return store.save(Book(
        title="Pride and Prejudice",
        summary="Elizabeth Bennet meets Mr Darcy.",
        isbn="9780141439518",
        author=sample_author.id,
        genres={sample_genres[0].id}
    ))

@pytest.fixture
def sample_instance(store, sample_book):
    """Create an available copy of the sample book."""
    return store.save(BookInstance(
        book=sample_book.id,
        imprint="Penguin Classics, 2003",
        status="Available"
    ))
