"""Paper list exports: sorted JSON dump and citation CSVs."""

import csv
import json
import logging
from pathlib import Path

from labpubs.formatting.citation import format_citation
from labpubs.sources.models import EnrichedItem, Item

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Month", "Year", "Citation", "PubMed ID", "DOI"]


# ── Helpers ──────────────────────────────────────────────────────────


def sort_by_date(items: list[Item]) -> list[Item]:
    """Newest first by (year, month); a missing month counts as 0.

    Items in the same year and month keep their input order.
    """
    return sorted(items, key=lambda i: (i.date.year, i.date.month or 0), reverse=True)


def enrich(items: list[Item], pmid_map: dict[str, str]) -> list[EnrichedItem]:
    """Attach PubMed IDs looked up by DOI."""
    return [
        EnrichedItem(item=item, pmid=pmid_map.get(item.DOI) if item.DOI else None)
        for item in items
    ]


def build_rows(items: list[EnrichedItem]) -> list[list]:
    """One CSV row per item, in CSV_COLUMNS order."""
    return [
        [
            e.item.date.month,
            e.item.date.year,
            format_citation(e.item),
            e.pmid,
            e.item.DOI,
        ]
        for e in items
    ]


def is_preprint(enriched: EnrichedItem) -> bool:
    return enriched.item.itemType == "preprint"


# ── JSON Export ──────────────────────────────────────────────────────


def export_papers_json(items: list[EnrichedItem], output_path: str | Path) -> None:
    """Write the full enriched list as a JSON array."""
    payload = [e.to_json() for e in items]
    Path(output_path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info("Papers JSON exported to %s (%d items)", output_path, len(payload))


# ── CSV Export ───────────────────────────────────────────────────────


def export_citations_csv(items: list[EnrichedItem], output_path: str | Path) -> None:
    rows = build_rows(items)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        writer.writerows(rows)

    logger.info("Citation CSV exported to %s (%d rows)", output_path, len(rows))
