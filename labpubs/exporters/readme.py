"""Regenerate the "## Papers" section of a README from the exported CSVs."""

import csv
import logging
from pathlib import Path

from tabulate import tabulate

logger = logging.getLogger(__name__)

PAPERS_HEADER = "## Papers"
PUBLICATIONS_HEADER = "### Publications"
PREPRINTS_HEADER = "### Preprints"


def csv_to_markdown(csv_path: str | Path) -> str:
    """Render a CSV file (first row = header) as a GitHub Markdown table."""
    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    if not rows:
        return ""
    return tabulate(rows[1:], headers=rows[0], tablefmt="github", disable_numparse=True)


def render_papers_section(pubs_csv: str | Path, preprints_csv: str | Path) -> str:
    return (
        f"{PAPERS_HEADER}\n"
        f"{PUBLICATIONS_HEADER}\n\n{csv_to_markdown(pubs_csv)}\n"
        f"{PREPRINTS_HEADER}\n\n{csv_to_markdown(preprints_csv)}\n"
    )


def update_readme(readme_path: str | Path, assets_dir: str | Path) -> None:
    """Replace everything from the first "## Papers" header onward.

    A README without the header gets the section appended.
    """
    readme_path = Path(readme_path)
    assets_dir = Path(assets_dir)

    head = readme_path.read_text(encoding="utf-8").split(PAPERS_HEADER, 1)[0]
    section = render_papers_section(assets_dir / "pubs.csv", assets_dir / "preprints.csv")
    readme_path.write_text(head + section, encoding="utf-8")

    logger.info("README papers section updated: %s", readme_path)
