"""Pydantic models for Zotero items and the validator that builds them."""

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from labpubs.core.errors import InvalidDateRange, SchemaViolation


def _empty_to_none(value: Any) -> Any:
    if value == "":
        return None
    return value


OptionalText = Annotated[Optional[str], BeforeValidator(_empty_to_none)]


# ── Dates ────────────────────────────────────────────────────────────


class ItemDate(BaseModel):
    """Publication date decoded from CSL-JSON ``issued.date-parts``."""

    year: int
    month: Optional[int] = None
    day: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def from_date_parts(cls, value: Any) -> Any:
        if not isinstance(value, dict) or "date-parts" not in value:
            return value

        ranges = value["date-parts"]
        if not isinstance(ranges, list) or len(ranges) != 1:
            raise PydanticCustomError(
                "invalid_date_range",
                "Expected exactly one date range, got {count}",
                {"count": len(ranges) if isinstance(ranges, list) else 0},
            )

        # e.g. [[2023, "5", 12]] or [["2023"]]
        try:
            if not isinstance(ranges[0], list):
                raise TypeError(ranges[0])
            parts = [int(p) for p in ranges[0]]
        except (TypeError, ValueError):
            raise PydanticCustomError(
                "invalid_date_parts",
                "Date parts must be numbers or numeric strings, got {parts}",
                {"parts": repr(ranges[0])},
            )
        return dict(zip(("year", "month", "day"), parts[:3]))


class CslJson(BaseModel):
    issued: ItemDate


# ── Creators ─────────────────────────────────────────────────────────


class NamedCreator(BaseModel):
    """Single-field creator, e.g. a consortium or an organisation."""

    creatorType: str
    name: str


class PersonCreator(BaseModel):
    creatorType: str
    firstName: str
    lastName: str


Creator = Union[NamedCreator, PersonCreator]


# ── Items ────────────────────────────────────────────────────────────


class BibliographicItem(BaseModel):
    """Fields shared by every item type."""

    key: str
    version: Optional[int] = None
    itemType: str
    title: str = Field(min_length=1)
    creators: list[Creator]
    date: ItemDate
    abstractNote: OptionalText = None
    DOI: OptionalText = None
    url: OptionalText = None
    shortTitle: OptionalText = None

    @field_validator("abstractNote")
    @classmethod
    def strip_abstract_prefix(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return re.sub(r"^Abstract\s+", "", v) or None


class JournalArticle(BibliographicItem):
    itemType: Literal["journalArticle"]
    publicationTitle: OptionalText = None
    volume: OptionalText = None
    issue: OptionalText = None
    pages: OptionalText = None
    series: OptionalText = None
    seriesTitle: OptionalText = None
    seriesText: OptionalText = None
    journalAbbreviation: OptionalText = None
    ISSN: OptionalText = None


class Preprint(BibliographicItem):
    itemType: Literal["preprint"]
    repository: OptionalText = None
    archiveID: OptionalText = None


class Thesis(BibliographicItem):
    itemType: Literal["thesis"]
    university: OptionalText = None
    thesisType: OptionalText = None


class ConferencePaper(BibliographicItem):
    itemType: Literal["conferencePaper"]
    proceedingsTitle: OptionalText = None
    conferenceName: OptionalText = None
    pages: OptionalText = None


class BookSection(BibliographicItem):
    itemType: Literal["bookSection"]
    bookTitle: OptionalText = None
    publisher: OptionalText = None
    pages: OptionalText = None


class Report(BibliographicItem):
    itemType: Literal["report"]
    institution: OptionalText = None
    reportNumber: OptionalText = None
    pages: OptionalText = None


class OtherItem(BibliographicItem):
    """Any item type without dedicated venue fields."""


_VARIANT_TAGS = {
    "journalArticle",
    "preprint",
    "thesis",
    "conferencePaper",
    "bookSection",
    "report",
}


def _item_tag(value: Any) -> str:
    if isinstance(value, dict):
        item_type = value.get("itemType")
    else:
        item_type = getattr(value, "itemType", None)
    if isinstance(item_type, str) and item_type in _VARIANT_TAGS:
        return item_type
    return "other"


Item = Annotated[
    Union[
        Annotated[JournalArticle, Tag("journalArticle")],
        Annotated[Preprint, Tag("preprint")],
        Annotated[Thesis, Tag("thesis")],
        Annotated[ConferencePaper, Tag("conferencePaper")],
        Annotated[BookSection, Tag("bookSection")],
        Annotated[Report, Tag("report")],
        Annotated[OtherItem, Tag("other")],
    ],
    Discriminator(_item_tag),
]

_ITEM_ADAPTER: TypeAdapter[Item] = TypeAdapter(Item)


class ZoteroEnvelope(BaseModel):
    """One entry of a Zotero ``format=json&include=csljson,data`` response."""

    data: dict
    csljson: CslJson


class EnrichedItem(BaseModel):
    """An item plus the PubMed ID resolved for its DOI, if any."""

    item: Item
    pmid: Optional[str] = None

    def to_json(self) -> dict:
        """Flat JSON form: ``pmid`` followed by the item fields, absent values omitted."""
        out = {"pmid": self.pmid} if self.pmid else {}
        out.update(self.item.model_dump(mode="json", exclude_none=True))
        return out


# ── Validation ───────────────────────────────────────────────────────


def parse_item(raw: dict) -> Item:
    """Validate a raw Zotero envelope and return the typed item.

    Raises InvalidDateRange for multi-range dates, SchemaViolation otherwise.
    """
    try:
        envelope = ZoteroEnvelope.model_validate(raw)
        return _ITEM_ADAPTER.validate_python(
            {**envelope.data, "date": envelope.csljson.issued}
        )
    except ValidationError as exc:
        key = raw.get("key", "?") if isinstance(raw, dict) else "?"
        for err in exc.errors():
            if err["type"] == "invalid_date_range":
                count = err.get("ctx", {}).get("count")
                raise InvalidDateRange(
                    f"Item {key}: expected exactly one date range, got {count}"
                ) from exc
        raise SchemaViolation(f"Item {key}: {exc}") from exc


def parse_items(raws: list[dict]) -> list[Item]:
    return [parse_item(raw) for raw in raws]
