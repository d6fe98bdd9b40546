# tests/test_display.py

from datetime import date
from catalog.display import author_name, format_date, iso_date, lifespan, list_url, present, url_for
from catalog.models import Author, Book, BookInstance, EntityKind

def test_author_name_needs_both_names():
    assert author_name(Author(first_name="Jane", family_name="Austen")) == "Jane Austen"
    assert author_name(Author(first_name="Jane", family_name="")) == ""
    assert author_name(Author(first_name="", family_name="Austen")) == ""

def test_dates():
    assert format_date(date(1775, 12, 16)) == "Dec 16, 1775"
    assert format_date(None) == ""
    assert iso_date(date(1775, 12, 16)) == "1775-12-16"
    assert iso_date(None) == ""
    assert iso_date("garbled") == "garbled"

def test_lifespan():
    author = Author(first_name="Jane", family_name="Austen",
                    date_of_birth=date(1775, 12, 16), date_of_death=date(1817, 7, 18))
    assert lifespan(author) == "Dec 16, 1775 - Jul 18, 1817"
    assert lifespan(Author(first_name="A", family_name="B")) == " - "

def test_urls():
    assert url_for(EntityKind.BOOK_INSTANCE, "4") == "/catalog/bookinstance/4"
    assert url_for("authors", 2) == "/catalog/author/2"
    assert list_url(EntityKind.GENRE) == "/catalog/genres"

def test_present_author():
    data = present(Author(id="3", first_name="Jane", family_name="Austen",
                          date_of_birth=date(1775, 12, 16)))
    assert data["url"] == "/catalog/author/3"
    assert data["name"] == "Jane Austen"
    assert data["date_of_birth"] == "1775-12-16"
    assert data["date_of_birth_formatted"] == "Dec 16, 1775"
    assert data["date_of_death_iso"] == ""

def test_present_unsaved_draft_has_no_url():
    data = present(Author.model_construct(first_name="Jane", family_name="Sm1th!", date_of_birth="bad"))
    assert "url" not in data
    assert data["date_of_birth_iso"] == "bad"
    assert data["date_of_birth_formatted"] == ""

def test_present_book_and_instance():
    book = present(Book(id="1", title="Emma", summary="s", isbn="i", author="2", genres={"10", "9"}))
    assert book["genres"] == ["9", "10"]

    instance = present(BookInstance(id="5", book="1", imprint="Penguin", due_back=date(2026, 10, 17)))
    assert instance["status"] == "Maintenance"
    assert instance["due_back_formatted"] == "Oct 17, 2026"
    assert instance["due_back_iso"] == "2026-10-17"
