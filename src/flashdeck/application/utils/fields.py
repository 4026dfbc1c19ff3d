"""Field codec: heading-delimited markdown <-> field mapping.

A note file looks like::

    # Front
    2+2?
    # Back
    4

Parsing is a single linear pass and never fails. Text before the first heading
is dropped, bodies are trimmed, and a repeated heading overwrites the earlier
value. Because of the trimming, ``serialize(parse(text))`` is not byte-exact
with hand-written input; it is stable after the first pass.
"""

import re

from flashdeck.domain.models import Fields

HEADING_RE = re.compile(r"^# (.*)$")


def parse_fields(md_text: str) -> Fields:
    # Handle potential BOM (Byte Order Mark)
    md_text = md_text.lstrip("\ufeff")

    fields: Fields = {}
    current: str | None = None
    body: list[str] = []

    for line in md_text.split("\n"):
        m = HEADING_RE.match(line.rstrip("\r"))
        if m:
            if current is not None:
                fields[current] = "\n".join(body).strip()
            current = m.group(1).strip()
            body = []
        else:
            body.append(line)

    if current is not None:
        fields[current] = "\n".join(body).strip()

    return fields


def serialize_fields(fields: Fields) -> str:
    return "".join(f"# {name}\n{body}\n" for name, body in fields.items())
