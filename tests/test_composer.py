# tests/test_composer.py

import pytest
from unittest.mock import patch
from catalog.composer import ReadModelComposer, genre_options
from catalog.errors import NotFound, StoreError
from catalog.models import Book, BookInstance, EntityKind, Genre

@pytest.fixture
def composer(store):
    return ReadModelComposer(store)

def test_book_list_resolves_authors(composer, sample_book, sample_author):
    context = composer.compose_list(EntityKind.BOOK)
    [book] = context["book_list"]
    assert book["title"] == "Pride and Prejudice"
    assert book["author_id"] == sample_author.id
    assert book["author"]["name"] == "Jane Austen"
    assert book["url"] == f"/catalog/book/{sample_book.id}"

def test_instance_list_resolves_books(composer, sample_instance, sample_book):
    [instance] = composer.compose_list(EntityKind.BOOK_INSTANCE)["bookinstance_list"]
    assert instance["book"]["title"] == sample_book.title
    assert instance["status"] == "Available"

def test_genre_list(composer, sample_genres):
    assert [g["name"] for g in composer.compose_list(EntityKind.GENRE)["genre_list"]] == ["Fiction", "Romance"]

def test_book_detail(composer, sample_book, sample_instance, sample_genres):
    context = composer.compose_detail(EntityKind.BOOK, sample_book.id)
    assert context["book"]["author"]["family_name"] == "Austen"
    assert [g["name"] for g in context["book"]["genres"]] == ["Fiction"]
    assert [i["id"] for i in context["book_instances"]] == [sample_instance.id]

def test_author_detail_lists_books(composer, sample_author, sample_book):
    context = composer.compose_detail(EntityKind.AUTHOR, sample_author.id)
    assert context["author"]["name"] == "Jane Austen"
    assert [b["title"] for b in context["author_books"]] == ["Pride and Prejudice"]

def test_instance_detail_resolves_book(composer, sample_instance):
    context = composer.compose_detail(EntityKind.BOOK_INSTANCE, sample_instance.id)
    assert context["bookinstance"]["book"]["title"] == "Pride and Prejudice"
    assert "book_instances" not in context

def test_detail_missing_raises_not_found(composer):
    with pytest.raises(NotFound):
        composer.compose_detail(EntityKind.GENRE, "999999")

def test_delete_view(composer, sample_genres, sample_book):
    context = composer.compose_delete(EntityKind.GENRE, sample_genres[0].id)
    assert context["genre"]["name"] == "Fiction"
    assert [b["id"] for b in context["genre_books"]] == [sample_book.id]
    assert composer.compose_delete(EntityKind.GENRE, "999999") is None

def test_book_form_context(composer, sample_author, sample_genres):
    context = composer.compose_form_context(EntityKind.BOOK)
    assert [a["name"] for a in context["authors"]] == ["Jane Austen"]
    assert [(g["name"], g["checked"]) for g in context["genres"]] == [("Fiction", False), ("Romance", False)]
    assert "book" not in context

def test_update_form_checks_selected_genres(composer, sample_book, sample_genres):
    context = composer.compose_update_form(EntityKind.BOOK, sample_book.id)
    assert context["book"]["title"] == "Pride and Prejudice"
    assert [(g["name"], g["checked"]) for g in context["genres"]] == [("Fiction", True), ("Romance", False)]

def test_update_form_missing_raises_not_found(composer):
    with pytest.raises(NotFound):
        composer.compose_update_form(EntityKind.AUTHOR, "999999")

def test_instance_form_lists_books(composer, sample_book):
    assert [b["title"] for b in composer.compose_form_context(EntityKind.BOOK_INSTANCE)["books"]] == [
        "Pride and Prejudice"
    ]

def test_genre_options_compare_canonical_ids():
    """Test that checked flags match ids whatever form they were submitted in."""
    genres = [Genre(id="7", name="Fiction"), Genre(id="12", name="Poetry"), Genre(id="3", name="Drama")]
    options = genre_options(genres, {7, " 012 ", "4"})
    assert [(o["id"], o["checked"]) for o in options] == [("7", True), ("12", True), ("3", False)]

def test_dashboard_counts(composer, store, sample_instance, sample_book, sample_genres):
    store.save(BookInstance(book=sample_book.id, imprint="Second copy", status="Loaned"))
    assert composer.compose_dashboard() == {
        "book_count": 1,
        "book_instance_count": 2,
        "book_instance_available_count": 1,
        "author_count": 1,
        "genre_count": 2,
    }

def test_dashboard_fails_as_a_whole(composer, store):
    """Test that one failing count fails the dashboard instead of reporting zero."""
    real_count = store.count

    def count(kind, predicate=None):
        if kind is EntityKind.AUTHOR:
            raise StoreError("author table unavailable")
        return real_count(kind, predicate)

    with patch.object(store, "count", side_effect=count):
        with pytest.raises(StoreError, match="author table unavailable"):
            composer.compose_dashboard()
