"""
Filesystem note store.

A deck is a directory under ``decks_root``; every note is one markdown file
named ``<note_id>_<template>.md`` whose content is the field codec
serialization. The filename is the durable encoding of the note's identity.
"""

import logging
import os
import re
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from flashdeck.application.utils.fields import parse_fields, serialize_fields
from flashdeck.consts import NOTE_SUFFIX
from flashdeck.domain.constants import DEFAULT_TEMPLATE
from flashdeck.domain.errors import (
    DeckNotFound,
    InvalidDeckName,
    InvalidTemplateName,
    NoteConflict,
    NoteNotFound,
    StorageError,
)
from flashdeck.domain.models import Fields, Note
from flashdeck.domain.ports import NoteRepository
from flashdeck.domain.templates import Template

logger = logging.getLogger(__name__)

# Templates never contain "_" (see validate_template), so ids like
# "1700000000_basic" survive a round trip.
NOTE_FILENAME_RE = re.compile(r"^(?P<note_id>.*?)(?:_(?P<template>[^_]*))?\.md$")


def note_filename(note_id: str, template: str) -> str:
    return f"{note_id}_{template}{NOTE_SUFFIX}"


def parse_note_filename(filename: str) -> tuple[str, str] | None:
    """
    Split ``<note_id>_<template>.md`` into (note_id, template).

    Empty or missing parts fall back to "basic" so legacy filenames are still
    listed. A name without a template part ("legacy.md") stays readable and
    writable in place; names with an empty part ("_basic.md", "x_.md") are
    listed but cannot be opened under the recovered identity.
    Returns None for files that are not notes.
    """
    m = NOTE_FILENAME_RE.match(filename)
    if not m:
        return None
    note_id = m.group("note_id") or DEFAULT_TEMPLATE
    template = m.group("template") or DEFAULT_TEMPLATE
    return note_id, template


def validate_deck_id(deck_id: str) -> str:
    if (
        not deck_id
        or deck_id in (".", "..")
        or "/" in deck_id
        or "\\" in deck_id
        or os.sep in deck_id
    ):
        raise InvalidDeckName(deck_id)
    return deck_id


def validate_template(template: str) -> str:
    if (
        not template
        or "_" in template
        or "/" in template
        or "\\" in template
        or os.sep in template
    ):
        raise InvalidTemplateName(template)
    return template


class FileNoteStore(NoteRepository):
    """Notes stored as markdown files, one directory per deck."""

    def __init__(self, root: Path, clock: Callable[[], float] = time.time):
        self.root = root
        self.clock = clock

    # ---------- Decks ----------

    def deck_path(self, deck_id: str) -> Path:
        return self.root / validate_deck_id(deck_id)

    def list_decks(self) -> list[str]:
        if not self.root.is_dir():
            return []
        try:
            return sorted(p.name for p in self.root.iterdir() if p.is_dir())
        except OSError as e:
            raise StorageError("list", self.root, e) from e

    def create_deck(self, deck_id: str) -> Path:
        path = self.deck_path(deck_id)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("create deck", path, e) from e
        logger.info(f"Created deck '{deck_id}' at {path}")
        return path

    def _existing_deck(self, deck_id: str) -> Path:
        path = self.deck_path(deck_id)
        if not path.is_dir():
            raise DeckNotFound(deck_id, path)
        return path

    # ---------- Notes ----------

    def path_for(self, deck_id: str, note_id: str, template: str) -> Path:
        return self.deck_path(deck_id) / note_filename(note_id, template)

    def note_path(self, note: Note) -> Path:
        return self.path_for(note.deck_id, note.note_id, note.template)

    def _readable_path(self, note: Note) -> Path:
        """
        The canonical path, or ``<note_id>.md`` for a legacy basic note listed
        from a filename without a template part.
        """
        path = self.note_path(note)
        if not path.exists() and note.template == DEFAULT_TEMPLATE:
            legacy = self.deck_path(note.deck_id) / f"{note.note_id}{NOTE_SUFFIX}"
            if legacy.is_file():
                return legacy
        return path

    def list_notes(self, deck_id: str) -> list[Note]:
        deck_dir = self._existing_deck(deck_id)
        notes = []
        try:
            entries = sorted(deck_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise StorageError("list", deck_dir, e) from e

        for p in entries:
            if not p.is_file():
                continue
            parsed = parse_note_filename(p.name)
            if parsed is None:
                logger.debug(f"[deck] Skipped {p.name}: not a note file")
                continue
            note_id, template = parsed
            notes.append(Note(deck_id=deck_id, note_id=note_id, template=template))
        return notes

    def read(self, note: Note) -> Fields:
        path = self._readable_path(note)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NoteNotFound(note.note_id, path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read", path, e) from e
        return parse_fields(text)

    def write(self, note: Note, fields: Fields) -> None:
        path = self._readable_path(note)
        _atomic_write(path, serialize_fields(fields))
        logger.debug(f"[write] {path}: {len(fields)} fields")

    def update(self, note: Note, fields: Fields) -> None:
        """Overwrite an existing note's content."""
        path = self._readable_path(note)
        if not path.is_file():
            raise NoteNotFound(note.note_id, path)
        self.write(note, fields)

    def create(self, deck_id: str, template: str, fields: Fields) -> Note:
        """
        Store a new note with id ``<unix_seconds>_<template>``.

        Raises InvalidTemplateName for templates that would not survive the
        filename round trip, and NoteConflict instead of overwriting when a
        note with the same id was already created within the same second.
        """
        validate_template(template)
        self._existing_deck(deck_id)
        missing = Template.lookup(template).missing_fields(fields)
        if missing:
            logger.warning(f"New {template} note in '{deck_id}' is missing fields: {missing}")

        note_id = f"{int(self.clock())}_{template}"
        note = Note(deck_id=deck_id, note_id=note_id, template=template)
        path = self.note_path(note)
        if path.exists():
            raise NoteConflict(note_id, path)

        _atomic_write(path, serialize_fields(fields))
        logger.info(f"Created note {note_id} in deck '{deck_id}'")
        return note


def _atomic_write(path: Path, text: str) -> None:
    """Write via a temp file in the same directory and rename over the target."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError("write", path, e) from e
