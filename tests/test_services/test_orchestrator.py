# tests/test_services/test_orchestrator.py

import pytest
from catalog.errors import NotFound
from catalog.models import EntityKind
from catalog.services import Created, DeleteBlocked, Deleted, FormRedisplay, Updated

def snapshot(store):
    return {kind: store.count(kind) for kind in EntityKind}

def test_genre_create_is_idempotent(orchestrator, store):
    """Test that creating the same genre twice returns the first one."""
    first = orchestrator.create(EntityKind.GENRE, {"name": "Fantasy"})
    second = orchestrator.create(EntityKind.GENRE, {"name": "  Fantasy "})

    assert isinstance(first, Created) and first.created
    assert isinstance(second, Created) and not second.created
    assert second.entity.id == first.entity.id
    assert store.count(EntityKind.GENRE) == 1

def test_invalid_create_redisplays_form(orchestrator, store):
    outcome = orchestrator.create(EntityKind.AUTHOR, {"first_name": "John", "family_name": "Sm1th!"})

    assert isinstance(outcome, FormRedisplay)
    assert [e.message for e in outcome.errors] == ["Family name has non-alphanumeric characters"]
    assert outcome.draft.family_name == "Sm1th!"
    assert outcome.form["author"]["family_name"] == "Sm1th!"
    assert store.count(EntityKind.AUTHOR) == 0

def test_invalid_book_keeps_lookups_and_selection(orchestrator, sample_author, sample_genres):
    """Test that a rejected book form is rebuilt with every author and genre."""
    fiction, romance = sample_genres
    outcome = orchestrator.create(EntityKind.BOOK, {
        "title": "", "author": sample_author.id, "summary": "s", "isbn": "i",
        "genres": romance.id,
    })

    assert isinstance(outcome, FormRedisplay)
    assert [a["id"] for a in outcome.form["authors"]] == [sample_author.id]
    assert [(g["name"], g["checked"]) for g in outcome.form["genres"]] == [("Fiction", False), ("Romance", True)]

def test_book_create_with_genres(orchestrator, store, sample_author, sample_genres):
    outcome = orchestrator.create(EntityKind.BOOK, {
        "title": "Emma", "author": sample_author.id, "summary": "Matchmaking.", "isbn": "1",
        "genres": [g.id for g in sample_genres],
    })
    assert isinstance(outcome, Created)
    assert store.find_by_id(EntityKind.BOOK, outcome.entity.id).genres == {g.id for g in sample_genres}

@pytest.mark.parametrize("target", ["author", "book", "genre"])
def test_delete_blocked_while_referenced(orchestrator, store, sample_instance, sample_book,
                                         sample_author, sample_genres, target):
    """Test that referenced records are never deleted and nothing changes."""
    entity_id = {
        "author": sample_author.id,
        "book": sample_book.id,
        "genre": sample_genres[0].id,
    }[target]
    before = snapshot(store)

    outcome = orchestrator.delete(EntityKind.parse(target), entity_id)

    assert isinstance(outcome, DeleteBlocked)
    assert outcome.entity.id == entity_id
    assert len(outcome.dependents) == 1
    assert snapshot(store) == before

def test_delete_unreferenced(orchestrator, store, sample_genres, sample_book):
    romance = sample_genres[1]
    outcome = orchestrator.delete(EntityKind.GENRE, romance.id)
    assert outcome == Deleted(EntityKind.GENRE, romance.id, True)
    assert store.find_by_id(EntityKind.GENRE, romance.id) is None

def test_delete_missing_is_treated_as_deleted(orchestrator):
    outcome = orchestrator.delete(EntityKind.AUTHOR, "999999")
    assert outcome == Deleted(EntityKind.AUTHOR, "999999", False)

def test_update(orchestrator, store, sample_author):
    outcome = orchestrator.update(EntityKind.AUTHOR, sample_author.id, {
        "first_name": "Jane", "family_name": "Austen", "date_of_birth": "1775-12-16",
    })
    assert isinstance(outcome, Updated)
    # Full replacement: the omitted date of death is cleared
    assert store.find_by_id(EntityKind.AUTHOR, sample_author.id).date_of_death is None

def test_update_missing_raises_not_found(orchestrator, store):
    with pytest.raises(NotFound):
        orchestrator.update(EntityKind.GENRE, "999999", {"name": "Ghost"})
    assert store.count(EntityKind.GENRE) == 0

def test_invalid_update_leaves_record(orchestrator, store, sample_author):
    outcome = orchestrator.update(EntityKind.AUTHOR, sample_author.id, {"first_name": "", "family_name": "Austen"})
    assert isinstance(outcome, FormRedisplay)
    assert outcome.draft.id == sample_author.id
    assert store.find_by_id(EntityKind.AUTHOR, sample_author.id) == sample_author

def test_genre_rename_conflict(orchestrator, store, sample_genres):
    fiction, romance = sample_genres
    outcome = orchestrator.update(EntityKind.GENRE, romance.id, {"name": "Fiction"})
    assert isinstance(outcome, FormRedisplay)
    assert [e.message for e in outcome.errors] == ["Genre name already exists"]
    assert store.find_by_id(EntityKind.GENRE, romance.id).name == "Romance"

def test_genre_update_keeping_its_name(orchestrator, sample_genres):
    fiction = sample_genres[0]
    outcome = orchestrator.update(EntityKind.GENRE, fiction.id, {"name": "Fiction"})
    assert isinstance(outcome, Updated)
    assert outcome.entity.name == "Fiction"
