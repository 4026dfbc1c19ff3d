from .note_store import FileNoteStore, note_filename, parse_note_filename
from .review_log import FileReviewLog

__all__ = ["FileNoteStore", "FileReviewLog", "note_filename", "parse_note_filename"]
