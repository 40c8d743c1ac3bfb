"""Lab config: YAML loader and Pydantic models for the Zotero/NCBI endpoints."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

ZOTERO_API_URL = "https://api.zotero.org"
NCBI_IDCONV_URL = "https://www.ncbi.nlm.nih.gov/pmc/utils/idconv/v1.0/"


# ── Zotero ───────────────────────────────────────────────────────────


class ZoteroSettings(BaseModel):
    """Where and how to talk to the Zotero Web API (v3)."""

    group_id: str
    base_url: str = ZOTERO_API_URL
    api_key: Optional[str] = None
    page_size: int = Field(default=100, ge=1, le=100, description="Zotero caps limit at 100")
    timeout: float = Field(default=30.0, gt=0)

    def group_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/groups/{self.group_id}/{path.lstrip('/')}"


class CollectionSettings(BaseModel):
    """The two collections a lab's paper list is built from."""

    publications: str
    preprints: str


# ── NCBI ─────────────────────────────────────────────────────────────


class NCBISettings(BaseModel):
    """PMC ID Converter endpoint used for DOI → PMID lookups."""

    idconv_url: str = NCBI_IDCONV_URL
    tool: Optional[str] = "labpubs"
    email: Optional[str] = None
    batch_size: int = Field(default=100, ge=1, le=200)
    timeout: float = Field(default=30.0, gt=0)


# ── Lab Config (top-level) ───────────────────────────────────────────


class LabConfig(BaseModel):
    """Top-level model for one lab's publication export."""

    name: str
    zotero: ZoteroSettings
    collections: CollectionSettings
    ncbi: NCBISettings = Field(default_factory=NCBISettings)
    fetch_mode: Literal["paged", "by_key"] = "paged"
    output_dir: str = "assets"

    @model_validator(mode="after")
    def distinct_collections(self) -> "LabConfig":
        if self.collections.publications == self.collections.preprints:
            raise ValueError(
                "Publications and preprints must be different collections "
                f"(both are {self.collections.publications!r})"
            )
        return self


# ── Helpers ──────────────────────────────────────────────────────────


def load_lab_config(path: str | Path) -> LabConfig:
    """Load a YAML lab config from disk and return a validated model.

    ``ZOTERO_API_KEY`` from the environment is used when the file has no key.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    zotero = raw.setdefault("zotero", {}) if isinstance(raw, dict) else None
    if isinstance(zotero, dict) and not zotero.get("api_key"):
        zotero["api_key"] = os.environ.get("ZOTERO_API_KEY") or None

    return LabConfig.model_validate(raw)
