"""Citation rendering for Zotero items.

Citations have the shape ``<authors>, "<title>", <venue> (<year>).``
"""

import logging
import re

from pydantic import BaseModel

from labpubs.sources.models import (
    BookSection,
    ConferencePaper,
    Creator,
    Item,
    JournalArticle,
    Preprint,
    Report,
    Thesis,
)

logger = logging.getLogger(__name__)

# URL substring → display name, checked in order
PREPRINT_SERVERS = (
    ("arxiv", "arXiv"),
    ("biorxiv", "bioRxiv"),
    ("medrxiv", "medRxiv"),
    ("osf", "OSF Preprints"),
    ("ssrn", "SSRN"),
)


class FormattedCitation(BaseModel):
    """Display projection of an item."""

    title: str
    authors: str
    venue: str
    year: int


# ── Authors ──────────────────────────────────────────────────────────


def format_initials(first_name: str) -> str:
    """Capital letters of a first name, in order: "Jane Ann" -> "JA"."""
    return "".join(re.findall(r"[A-Z]", first_name))


def format_author(creator: Creator) -> str:
    name = getattr(creator, "name", None)
    if name is not None:
        return name
    return f"{format_initials(creator.firstName)} {creator.lastName}".strip()


def format_authors(creators: list[Creator]) -> str:
    """Join author-role creators; exactly two are joined with " and "."""
    names = [format_author(c) for c in creators if c.creatorType == "author"]
    if len(names) == 2:
        return " and ".join(names)
    return ", ".join(names)


# ── Venue ────────────────────────────────────────────────────────────


def _emphasis(text: str, marker: str, rich: bool) -> str:
    return f"{marker}{text}{marker}" if rich else text


def preprint_server(url: str | None) -> str:
    url = (url or "").lower()
    for needle, label in PREPRINT_SERVERS:
        if needle in url:
            return label
    return "Preprint"


def _journal_venue(item: JournalArticle, rich: bool) -> str:
    if not item.publicationTitle:
        return ""
    venue = _emphasis(item.publicationTitle, "*", rich)
    if item.volume:
        venue += " " + _emphasis(item.volume, "**", rich)
    if item.issue:
        venue += f"({item.issue})"
    if item.pages:
        venue += (":" if item.issue or item.volume else " ") + item.pages
    return venue


def format_venue(item: Item, rich: bool = False) -> str:
    """Venue text for the item's type; "" for types we don't know how to render."""
    if isinstance(item, Thesis):
        return "Thesis"
    if isinstance(item, Preprint):
        return preprint_server(item.url)
    if isinstance(item, JournalArticle):
        return _journal_venue(item, rich)
    if isinstance(item, ConferencePaper):
        if not item.proceedingsTitle:
            return ""
        return _emphasis(item.proceedingsTitle, "*", rich)
    if isinstance(item, BookSection):
        if not item.bookTitle:
            return ""
        return _emphasis(item.bookTitle, "*", rich) + " (Book)"
    if isinstance(item, Report):
        return " ".join(part for part in (item.institution, item.pages) if part)

    logger.warning("Unknown item type %r for item %s", item.itemType, item.key)
    return ""


# ── Citation ─────────────────────────────────────────────────────────


def format_citation(item: Item, rich: bool = False) -> str:
    authors = format_authors(item.creators)
    title = f"**{item.title}**" if rich else f'"{item.title}"'
    venue = format_venue(item, rich=rich)
    return f"{authors}, {title}, {venue} ({item.date.year})."


def format_item(item: Item) -> FormattedCitation:
    return FormattedCitation(
        title=item.title,
        authors=format_authors(item.creators),
        venue=format_venue(item),
        year=item.date.year,
    )
