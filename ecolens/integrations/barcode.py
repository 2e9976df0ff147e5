# ecolens/integrations/barcode.py — product lookup: Open Food Facts, then UPC Item DB
from __future__ import annotations
import logging
from urllib.parse import quote
from typing import Any, Callable, Dict, Optional, Sequence

import requests

from ..errors import NotFoundError
from ..schemas import ProductRecord

logger = logging.getLogger(__name__)

OFF_URL = "https://world.openfoodfacts.org/api/v0/product/{barcode}.json"
UPC_URL = "https://api.upcitemdb.com/prod/trial/lookup"  # free tier, ~100 req/day
DEFAULT_TIMEOUT = 5.0

NOT_FOUND = ProductRecord(found=False)


# --- normalizers ------------------------------------------------------------
def normalize_open_food_facts(product: Dict[str, Any]) -> ProductRecord:
    return ProductRecord(
        found=True,
        source="Open Food Facts",
        name=product.get("product_name") or "Unknown Product",
        brand=product.get("brands") or "Unknown Brand",
        categories=product.get("categories") or "N/A",
        ingredients=product.get("ingredients_text") or "Not available",
        packaging=product.get("packaging") or "Not specified",
        labels=product.get("labels") or "",
        nutriscore=product.get("nutriscore_grade") or "N/A",
        ecoscore=product.get("ecoscore_grade") or "N/A",
        image_url=product.get("image_url") or None,
    )


def normalize_upcitemdb(item: Dict[str, Any]) -> ProductRecord:
    images = item.get("images") or []
    return ProductRecord(
        found=True,
        source="UPC Item DB",
        name=item.get("title") or "Unknown Product",
        brand=item.get("brand") or "Unknown Brand",
        categories=item.get("category") or "N/A",
        description=item.get("description") or "Not available",
        image_url=images[0] if images else None,
    )


# --- raw fetches (raise on any miss) ----------------------------------------
def _fetch_open_food_facts(barcode: str, http, timeout: float) -> ProductRecord:
    r = http.get(OFF_URL.format(barcode=quote(barcode, safe="")), timeout=timeout)
    r.raise_for_status()
    data = r.json()
    if data.get("status") != 1:
        raise NotFoundError(f"{barcode} not in Open Food Facts")
    return normalize_open_food_facts(data["product"])


def _fetch_upcitemdb(barcode: str, http, timeout: float) -> ProductRecord:
    r = http.get(UPC_URL, params={"upc": barcode}, timeout=timeout)
    r.raise_for_status()
    items = r.json().get("items")
    if not items:
        raise NotFoundError(f"{barcode} not in UPC Item DB")
    return normalize_upcitemdb(items[0])


def _absorbing(name: str, fetch: Callable[..., ProductRecord]) -> Callable[..., ProductRecord]:
    """Wrap a fetch so every failure comes back as a not-found record."""
    def lookup(barcode: str, http=requests, timeout: float = DEFAULT_TIMEOUT) -> ProductRecord:
        try:
            return fetch(barcode, http, timeout)
        except NotFoundError as e:
            logger.info("[barcode] %s: %s", name, e)
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            # network error, timeout, HTTP status, bad JSON or unexpected shape
            logger.info("[barcode] %s lookup failed: %s", name, e)
        return NOT_FOUND
    lookup.__name__ = fetch.__name__.replace("_fetch", "lookup")
    return lookup


lookup_open_food_facts = _absorbing("Open Food Facts", _fetch_open_food_facts)
lookup_upcitemdb = _absorbing("UPC Item DB", _fetch_upcitemdb)

# tried in this order; first hit wins
PROVIDERS: Sequence[Callable[..., ProductRecord]] = (lookup_open_food_facts, lookup_upcitemdb)


def resolve_barcode(
    barcode: str,
    http=requests,
    timeout: float = DEFAULT_TIMEOUT,
    providers: Optional[Sequence[Callable[..., ProductRecord]]] = None,
) -> ProductRecord:
    """Look a barcode up in each provider in turn.

    Never raises for provider trouble: misses, timeouts and garbage responses
    all end as ``ProductRecord(found=False)``.
    """
    for lookup in providers or PROVIDERS:
        record = lookup(barcode, http=http, timeout=timeout)
        if record.found:
            logger.info("[barcode] %s found in %s", barcode, record.source)
            return record
    logger.info("[barcode] %s not found in product databases", barcode)
    return NOT_FOUND
