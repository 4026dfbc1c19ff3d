from datetime import datetime, timezone

import pytest

from flashdeck.application.card_service import CardService
from flashdeck.infrastructure.note_store import FileNoteStore
from flashdeck.infrastructure.review_log import FileReviewLog

DECK = "default"


@pytest.fixture
def decks_root(tmp_path):
    """Creates a temporary decks root with one empty deck."""
    root = tmp_path / "decks"
    (root / DECK).mkdir(parents=True)
    return root


@pytest.fixture
def deck_dir(decks_root):
    return decks_root / DECK


@pytest.fixture
def note_store(decks_root):
    return FileNoteStore(root=decks_root, clock=lambda: 1700000000.0)


@pytest.fixture
def review_log(decks_root):
    return FileReviewLog(root=decks_root)


@pytest.fixture
def service(note_store, review_log):
    return CardService(notes=note_store, reviews=review_log)


@pytest.fixture
def now():
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for key in ("FLASHDECK_DECKS_ROOT", "FLASHDECK_VERBOSE", "FLASHDECK_STRICT_REVIEWS"):
        monkeypatch.delenv(key, raising=False)
    return home
