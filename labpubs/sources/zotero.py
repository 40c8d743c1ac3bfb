"""Zotero Web API client for group collections.

See https://www.zotero.org/support/dev/web_api/v3/basics
"""

import logging
from typing import Iterable

import requests
from tqdm import tqdm

from labpubs.core.errors import CollectionOverlapError, FetchError
from labpubs.core.lab_config import ZoteroSettings
from labpubs.sources.models import Item, parse_item

logger = logging.getLogger(__name__)

_INCLUDE = "csljson,data"
_ITEM_RETRIES = 1  # single-item fetches are retried once, immediately


# ── Public API ───────────────────────────────────────────────────────


def fetch_collection(
    settings: ZoteroSettings,
    collection_id: str,
    mode: str = "paged",
    session: requests.Session | None = None,
) -> list[Item]:
    """Fetch every bibliographic item of a collection.

    "paged" walks the item listing; "by_key" lists keys and fetches each item.
    """
    session = session or _new_session(settings)
    if mode == "paged":
        return fetch_collection_items(settings, collection_id, session=session)
    if mode == "by_key":
        keys = fetch_collection_item_keys(settings, collection_id, session=session)
        return fetch_items_by_key(settings, sorted(keys), session=session)
    raise ValueError(f"Unknown fetch mode: {mode!r}")


def fetch_collection_items(
    settings: ZoteroSettings,
    collection_id: str,
    session: requests.Session | None = None,
) -> list[Item]:
    """Page through a collection, skipping attachments and notes."""
    session = session or _new_session(settings)
    page_size = settings.page_size
    items: list[Item] = []
    start = 0

    while True:
        page = _get(
            session,
            settings,
            f"collections/{collection_id}/items",
            {
                "format": "json",
                "include": _INCLUDE,
                "itemType": "-attachment",
                "limit": page_size,
                "start": start,
            },
        ).json()

        # Notes can't be excluded together with attachments in one request
        entries = [e for e in page if (e.get("data") or {}).get("itemType") != "note"]
        items.extend(parse_item(e) for e in entries)
        logger.debug(
            "Collection %s: page at %d had %d entries (%d kept)",
            collection_id,
            start,
            len(page),
            len(entries),
        )

        if len(page) < page_size:
            break  # end of the collection
        start += page_size

    logger.info("Fetched %d items from collection %s", len(items), collection_id)
    return items


def fetch_collection_item_keys(
    settings: ZoteroSettings,
    collection_id: str,
    session: requests.Session | None = None,
) -> set[str]:
    """Keys of every non-attachment, non-note item in a collection."""
    session = session or _new_session(settings)
    path = f"collections/{collection_id}/items"

    keys = _parse_keys(
        _get(session, settings, path, {"format": "keys", "itemType": "-attachment"}).text
    )
    note_keys = _parse_keys(
        _get(session, settings, path, {"format": "keys", "itemType": "note"}).text
    )
    keys -= note_keys

    logger.info(
        "Collection %s lists %d item keys (%d notes removed)",
        collection_id,
        len(keys),
        len(note_keys),
    )
    return keys


def fetch_item(
    settings: ZoteroSettings,
    key: str,
    session: requests.Session | None = None,
) -> Item:
    """Fetch a single item by key, retrying once on network/HTTP failure."""
    session = session or _new_session(settings)
    params = {"format": "json", "include": _INCLUDE}

    for attempt in range(1, _ITEM_RETRIES + 2):
        try:
            response = _get(session, settings, f"items/{key}", params)
            break
        except requests.RequestException as exc:
            if attempt > _ITEM_RETRIES:
                raise FetchError(key, exc) from exc
            logger.warning("Fetching item %s failed (%s), retrying", key, exc)

    return parse_item(response.json())


def fetch_items_by_key(
    settings: ZoteroSettings,
    keys: Iterable[str],
    session: requests.Session | None = None,
) -> list[Item]:
    """Fetch items one at a time; items that fail twice are logged and dropped."""
    session = session or _new_session(settings)
    keys = list(keys)
    items: list[Item] = []

    for key in tqdm(keys, desc="Fetching items", unit="item"):
        try:
            items.append(fetch_item(settings, key, session=session))
        except FetchError as exc:
            logger.error("Dropping item: %s", exc)

    if len(items) < len(keys):
        logger.warning("Fetched %d of %d items", len(items), len(keys))
    return items


def ensure_disjoint(publications: list[Item], preprints: list[Item]) -> None:
    """Fail when an item is filed in both the publications and preprints collections."""
    overlap = {i.key for i in publications} & {i.key for i in preprints}
    if overlap:
        raise CollectionOverlapError(overlap)


# ── HTTP ─────────────────────────────────────────────────────────────


def _new_session(settings: ZoteroSettings) -> requests.Session:
    session = requests.Session()
    session.headers["Zotero-API-Version"] = "3"
    if settings.api_key:
        session.headers["Zotero-API-Key"] = settings.api_key
    return session


def _get(
    session: requests.Session,
    settings: ZoteroSettings,
    path: str,
    params: dict,
) -> requests.Response:
    response = session.get(settings.group_url(path), params=params, timeout=settings.timeout)
    response.raise_for_status()
    return response


def _parse_keys(text: str) -> set[str]:
    return {line.strip() for line in text.splitlines() if line.strip()}
