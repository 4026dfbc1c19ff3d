"""flashdeck: markdown flashcard decks with a spaced-repetition scheduler."""

from flashdeck.consts import VERSION

__version__ = VERSION
