"""Publication export pipeline: Zotero → PubMed IDs → JSON/CSV artifacts."""

import argparse
import logging
import os
import time
from pathlib import Path

import requests

from labpubs.core.lab_config import LabConfig, load_lab_config
from labpubs.exporters import export_all
from labpubs.exporters.papers import enrich, sort_by_date
from labpubs.exporters.readme import update_readme
from labpubs.sources.models import Item
from labpubs.sources.pubmed import get_pubmed_ids
from labpubs.sources.zotero import ensure_disjoint, fetch_collection

logger = logging.getLogger(__name__)

# Relative to the working directory: the checkout the export runs in
DEFAULT_CONFIG_PATH = Path("lab_configs") / "hidive.yaml"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ── Pipeline ─────────────────────────────────────────────────────────


def run(
    config: LabConfig,
    output_dir: str | Path | None = None,
    zotero_session: requests.Session | None = None,
    ncbi_session: requests.Session | None = None,
) -> dict:
    """Fetch, enrich and export a lab's papers. Returns the written paths."""
    t_start = time.time()
    output_dir = Path(output_dir or config.output_dir)
    logger.info("Lab: %s", config.name)

    publications = _stage_fetch(config, "publications", config.collections.publications, zotero_session)
    preprints = _stage_fetch(config, "preprints", config.collections.preprints, zotero_session)
    ensure_disjoint(publications, preprints)
    items = publications + preprints

    dois = [item.DOI for item in items if item.DOI]
    logger.info("Fetching PubMed IDs for %d DOIs", len(dois))
    pmid_map = get_pubmed_ids(dois, config.ncbi, session=ncbi_session)
    logger.info("Found %d PubMed IDs", len(pmid_map))

    enriched = enrich(sort_by_date(items), pmid_map)
    paths = export_all(enriched, output_dir)

    logger.info("=" * 60)
    logger.info(
        "Exported %d papers to %s in %.1fs", len(enriched), output_dir, time.time() - t_start
    )
    return paths


def _stage_fetch(
    config: LabConfig,
    label: str,
    collection_id: str,
    session: requests.Session | None,
) -> list[Item]:
    t = time.time()
    logger.info("=" * 60)
    logger.info("Fetching %s (collection %s)", label, collection_id)

    items = fetch_collection(
        config.zotero, collection_id, mode=config.fetch_mode, session=session
    )
    logger.info("Fetched %d %s in %.1fs", len(items), label, time.time() - t)
    return items


# ── CLI ──────────────────────────────────────────────────────────────


def _config_path() -> Path:
    return Path(os.environ.get("LABPUBS_CONFIG") or DEFAULT_CONFIG_PATH)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Export a lab's Zotero publications to JSON and CSV"
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        default=None,
        help="Directory for papers.json, pubs.csv and preprints.csv",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S")

    try:
        config = load_lab_config(_config_path())
        run(config, args.output_dir)
    except Exception as exc:
        logger.error("Export failed: %s", exc, exc_info=True)
        raise


def readme_main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Rewrite the README papers section from exported CSVs"
    )
    parser.add_argument("readme", nargs="?", default="README.md", help="README to update")
    parser.add_argument("assets_dir", nargs="?", default="assets", help="Directory holding the CSVs")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S")
    update_readme(args.readme, args.assets_dir)


if __name__ == "__main__":
    main()
