"""Tests for the filesystem note store."""

from unittest.mock import patch

import pytest

from flashdeck.domain.errors import (
    DeckNotFound,
    InvalidDeckName,
    InvalidTemplateName,
    NoteConflict,
    NoteNotFound,
    StorageError,
)
from flashdeck.domain.models import Note
from flashdeck.infrastructure.note_store import (
    FileNoteStore,
    note_filename,
    parse_note_filename,
)

DECK = "default"


# ---------- Filenames ----------


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("basic_basic.md", ("basic", "basic")),
        ("1700000000_basic.md", ("1700000000", "basic")),
        ("1700000000_basic_basic.md", ("1700000000_basic", "basic")),
        ("legacy.md", ("legacy", "basic")),
        ("_basic.md", ("basic", "basic")),
        ("note_.md", ("note", "basic")),
    ],
)
def test_parse_note_filename(filename, expected):
    assert parse_note_filename(filename) == expected


@pytest.mark.parametrize("filename", ["notes.txt", "note.md.bak", ".note.md.x1y2.tmp"])
def test_parse_note_filename_rejects_other_files(filename):
    assert parse_note_filename(filename) is None


def test_note_filename_round_trip():
    assert parse_note_filename(note_filename("1700000000_basic", "basic")) == (
        "1700000000_basic",
        "basic",
    )


def test_path_for(note_store, decks_root):
    assert note_store.path_for(DECK, "basic", "basic") == decks_root / DECK / "basic_basic.md"


@pytest.mark.parametrize("deck_id", ["", ".", "..", "a/b", "a\\b"])
def test_invalid_deck_names(note_store, deck_id):
    with pytest.raises(InvalidDeckName):
        note_store.deck_path(deck_id)


# ---------- Decks ----------


def test_list_and_create_decks(note_store, decks_root):
    note_store.create_deck("spanish")
    note_store.create_deck("spanish")
    (decks_root / "stray.txt").write_text("x")

    assert note_store.list_decks() == ["default", "spanish"]


def test_list_decks_without_root(tmp_path):
    assert FileNoteStore(root=tmp_path / "missing").list_decks() == []


# ---------- Read / write ----------


def test_write_then_read(note_store, deck_dir):
    note = Note(deck_id=DECK, note_id="basic", template="basic")
    note_store.write(note, {"Front": "2+2?", "Back": "4"})

    assert (deck_dir / "basic_basic.md").read_text() == "# Front\n2+2?\n# Back\n4\n"
    assert note_store.read(note) == {"Front": "2+2?", "Back": "4"}


def test_write_overwrites_and_leaves_no_temp_files(note_store, deck_dir):
    note = Note(deck_id=DECK, note_id="n")
    note_store.write(note, {"Front": "old"})
    note_store.write(note, {"Front": "new"})

    assert note_store.read(note) == {"Front": "new"}
    assert [p.name for p in deck_dir.iterdir()] == ["n_basic.md"]


def test_read_missing_note(note_store):
    with pytest.raises(NoteNotFound) as exc:
        note_store.read(Note(deck_id=DECK, note_id="ghost"))
    assert exc.value.note_id == "ghost"


def test_read_failure_is_storage_error(note_store, deck_dir):
    note = Note(deck_id=DECK, note_id="n")
    note_store.write(note, {"Front": "Q"})
    with patch("pathlib.Path.read_text", side_effect=PermissionError("denied")):
        with pytest.raises(StorageError) as exc:
            note_store.read(note)
    assert isinstance(exc.value.__cause__, PermissionError)


def test_write_into_missing_deck_is_storage_error(note_store):
    with pytest.raises(StorageError):
        note_store.write(Note(deck_id="missing", note_id="n"), {"Front": "Q"})


def test_failed_write_keeps_previous_content(note_store, deck_dir):
    note = Note(deck_id=DECK, note_id="n")
    note_store.write(note, {"Front": "kept"})

    with patch("os.replace", side_effect=OSError("disk full")):
        with pytest.raises(StorageError):
            note_store.write(note, {"Front": "lost"})

    assert note_store.read(note) == {"Front": "kept"}
    assert [p.name for p in deck_dir.iterdir()] == ["n_basic.md"]


def test_update_requires_existing_note(note_store):
    with pytest.raises(NoteNotFound):
        note_store.update(Note(deck_id=DECK, note_id="ghost"), {"Front": "Q"})


def test_update_existing_note(note_store):
    note = Note(deck_id=DECK, note_id="n")
    note_store.write(note, {"Front": "Q", "Back": "A"})
    note_store.update(note, {"Front": "Q", "Back": "B"})
    assert note_store.read(note)["Back"] == "B"


# ---------- Create ----------


def test_create_note(note_store, deck_dir):
    note = note_store.create(DECK, "basic", {"Front": "Q", "Back": "A"})

    assert note == Note(deck_id=DECK, note_id="1700000000_basic", template="basic")
    assert (deck_dir / "1700000000_basic_basic.md").is_file()
    assert note_store.list_notes(DECK) == [note]


def test_create_same_second_conflicts(note_store):
    note_store.create(DECK, "basic", {"Front": "Q1", "Back": "A1"})
    with pytest.raises(NoteConflict):
        note_store.create(DECK, "basic", {"Front": "Q2", "Back": "A2"})


def test_create_uses_clock(decks_root):
    ticks = iter([100.9, 101.2])
    store = FileNoteStore(root=decks_root, clock=lambda: next(ticks))

    first = store.create(DECK, "basic", {"Front": "Q1", "Back": "A1"})
    second = store.create(DECK, "basic", {"Front": "Q2", "Back": "A2"})

    assert (first.note_id, second.note_id) == ("100_basic", "101_basic")


def test_create_in_missing_deck(note_store):
    with pytest.raises(DeckNotFound):
        note_store.create("missing", "basic", {"Front": "Q", "Back": "A"})


def test_create_with_missing_fields_logs_warning(note_store, caplog):
    with caplog.at_level("WARNING"):
        note = note_store.create(DECK, "basic", {"Front": "Q"})
    assert "missing fields" in caplog.text
    assert note_store.read(note) == {"Front": "Q"}


@pytest.mark.parametrize("template", ["x_y", "my_tpl", "", "a/b"])
def test_create_rejects_templates_that_break_filenames(note_store, deck_dir, template):
    with pytest.raises(InvalidTemplateName):
        note_store.create(DECK, template, {"Front": "Q", "Back": "A"})
    assert list(deck_dir.iterdir()) == []


def test_created_note_lists_back_under_same_identity(note_store):
    note = note_store.create(DECK, "cloze", {"Text": "a {{c1::b}}"})
    assert note_store.list_notes(DECK) == [note]
    assert note_store.read(note) == {"Text": "a {{c1::b}}"}


# ---------- Legacy filenames ----------


def test_legacy_note_without_template_is_readable(note_store, deck_dir):
    (deck_dir / "legacy.md").write_text("# Front\nQ\n# Back\nA\n")

    [note] = note_store.list_notes(DECK)

    assert note == Note(deck_id=DECK, note_id="legacy", template="basic")
    assert note_store.read(note) == {"Front": "Q", "Back": "A"}


def test_legacy_note_is_updated_in_place(note_store, deck_dir):
    (deck_dir / "legacy.md").write_text("# Front\nQ\n# Back\nA\n")
    [note] = note_store.list_notes(DECK)

    note_store.update(note, {"Front": "Q", "Back": "B"})

    assert [p.name for p in deck_dir.iterdir()] == ["legacy.md"]
    assert note_store.read(note)["Back"] == "B"
