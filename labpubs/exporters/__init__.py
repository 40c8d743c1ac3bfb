"""Export convenience function."""

import logging
from pathlib import Path

from labpubs.exporters.papers import export_citations_csv, export_papers_json, is_preprint
from labpubs.sources.models import EnrichedItem

logger = logging.getLogger(__name__)


def export_all(items: list[EnrichedItem], output_dir: str | Path) -> dict:
    """Run all exports and return dict of file paths created."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {}

    papers_path = str(out / "papers.json")
    export_papers_json(items, papers_path)
    paths["papers_json"] = papers_path

    pubs_path = str(out / "pubs.csv")
    export_citations_csv([e for e in items if not is_preprint(e)], pubs_path)
    paths["pubs_csv"] = pubs_path

    preprints_path = str(out / "preprints.csv")
    export_citations_csv([e for e in items if is_preprint(e)], preprints_path)
    paths["preprints_csv"] = preprints_path

    logger.info("All exports written to %s", output_dir)
    return paths
