"""
models/quote.py
---------------
Domain model for catalog entries and parsing of the content API payload.

Two payload shapes are accepted:
    {"id": "...", "quote": "...", "title": "...", "link": "/..."}
    {"quotes": ["...", "..."], "title": "...", "link": "/..."}
The second shape is flattened into one QuoteEntry per quote, identified
by a digest of its text, so recent-quote tracking is always per quote.
"""

import hashlib
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class QuoteEntry:
    """
    One quote of the catalog.

    Attributes:
        identifier: Stable id used for repetition tracking.
        text: The quote itself.
        title: Title of the book/post the quote comes from.
        link: Path of the post, relative to the blog base URL.
    """
    identifier: str
    text: str
    title: str
    link: str

    def to_dict(self) -> dict:
        return asdict(self)


def quote_identifier(text: str) -> str:
    """Derive a stable identifier from the quote text."""
    return hashlib.sha1(text.strip().encode("utf-8")).hexdigest()[:16]


def parse_catalog(payload: Any) -> list[QuoteEntry]:
    """
    Normalize a raw catalog payload into a flat list of QuoteEntry.

    Duplicated identifiers keep their first occurrence.

    Raises:
        ValueError: If the payload or any entry is malformed.
    """
    if not isinstance(payload, list):
        raise ValueError("catalog must be a list")

    entries: list[QuoteEntry] = []
    seen: set[str] = set()
    for index, raw in enumerate(payload):
        for entry in _parse_entry(raw, index):
            if entry.identifier in seen:
                continue
            seen.add(entry.identifier)
            entries.append(entry)
    return entries


def _parse_entry(raw: Any, index: int) -> list[QuoteEntry]:
    if not isinstance(raw, dict):
        raise ValueError(f"catalog entry #{index} is not an object")

    title = raw.get("title")
    link = raw.get("link")
    if not isinstance(title, str) or not isinstance(link, str):
        raise ValueError(f"catalog entry #{index} needs a 'title' and a 'link'")

    if "quotes" in raw:
        quotes = raw["quotes"]
        if not isinstance(quotes, list) or not quotes:
            raise ValueError(f"catalog entry #{index} has no quotes")
        texts = [_clean_text(q, index) for q in quotes]
        return [QuoteEntry(quote_identifier(t), t, title, link) for t in texts]

    text = _clean_text(raw.get("quote", raw.get("text")), index)
    identifier = raw.get("identifier", raw.get("id"))
    identifier = str(identifier) if identifier not in (None, "") else quote_identifier(text)
    return [QuoteEntry(identifier, text, title, link)]


def _clean_text(value: Any, index: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"catalog entry #{index} has an empty quote")
    return value.strip()
