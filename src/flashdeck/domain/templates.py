"""
Note templates.

A template decides which fields a note must carry and how many cards it
yields. Only the single front/back template exists today; multi-card
templates (e.g. cloze deletions) plug in here.
"""

from dataclasses import dataclass
from enum import Enum

from .constants import DEFAULT_TEMPLATE
from .models import Fields


@dataclass(frozen=True)
class CardFace:
    """The displayable sides of a card."""

    front: str
    back: str


class Template(Enum):
    BASIC = DEFAULT_TEMPLATE

    @property
    def required_fields(self) -> tuple[str, ...]:
        return _REQUIRED_FIELDS[self]

    @property
    def cards_per_note(self) -> int:
        return _CARDS_PER_NOTE[self]

    @classmethod
    def lookup(cls, name: str) -> "Template":
        """Resolve a template name, falling back to BASIC for unknown names."""
        try:
            return cls(name)
        except ValueError:
            return cls.BASIC

    def card_face(self, fields: Fields, card_num: int = 1) -> CardFace:
        front_name, back_name = self.required_fields
        return CardFace(front=fields.get(front_name, ""), back=fields.get(back_name, ""))

    def missing_fields(self, fields: Fields) -> list[str]:
        return [name for name in self.required_fields if name not in fields]


_REQUIRED_FIELDS = {
    Template.BASIC: ("Front", "Back"),
}

_CARDS_PER_NOTE = {
    Template.BASIC: 1,
}
