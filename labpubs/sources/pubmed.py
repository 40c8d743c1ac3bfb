"""DOI → PubMed ID lookup via the NCBI PMC ID Converter."""

import logging
from typing import Iterable, Optional

import requests
from pydantic import BaseModel

from labpubs.core.lab_config import NCBISettings

logger = logging.getLogger(__name__)


class IdConverterRecord(BaseModel):
    doi: Optional[str] = None
    pmid: Optional[str] = None


class IdConverterResponse(BaseModel):
    records: list[IdConverterRecord]


# ── Public API ───────────────────────────────────────────────────────


def get_pubmed_ids(
    dois: Iterable[str],
    settings: NCBISettings | None = None,
    session: requests.Session | None = None,
) -> dict[str, str]:
    """Map DOIs to PubMed IDs, querying the converter in batches.

    DOIs the service does not resolve are left out of the result.
    """
    settings = settings or NCBISettings()
    session = session or requests.Session()
    dois = list(dict.fromkeys(d for d in dois if d))
    batch_size = settings.batch_size

    pmids: dict[str, str] = {}
    for start in range(0, len(dois), batch_size):
        batch = dois[start : start + batch_size]
        for record in _convert(session, settings, batch).records:
            if record.doi and record.pmid:
                pmids[record.doi] = record.pmid
        logger.info(
            "Resolved %d PubMed IDs after %d/%d DOIs",
            len(pmids),
            min(start + batch_size, len(dois)),
            len(dois),
        )

    return pmids


# ── HTTP ─────────────────────────────────────────────────────────────


def _convert(
    session: requests.Session, settings: NCBISettings, dois: list[str]
) -> IdConverterResponse:
    params = {"ids": ",".join(dois), "format": "json"}
    if settings.tool:
        params["tool"] = settings.tool
    if settings.email:
        params["email"] = settings.email

    response = session.get(settings.idconv_url, params=params, timeout=settings.timeout)
    response.raise_for_status()
    return IdConverterResponse.model_validate(response.json())
