"""
Transforms applied to a successful vendor body before it is relayed.

A transform is any callable ``(raw, *, correlation_id, query) -> body``. The
default relays the vendor JSON untouched; ``normalize_reseller_catalog`` maps
the reseller's ``catalog``/``recordsFound`` shape onto ``CatalogResponse``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Protocol

from app.schemas import CatalogQuery, CatalogResponse, Product

logger = logging.getLogger(__name__)


class CatalogTransform(Protocol):
    def __call__(
        self, raw: Any, *, correlation_id: str, query: CatalogQuery
    ) -> Any:  # pragma: no cover - protocol
        ...


def passthrough(raw: Any, *, correlation_id: str, query: CatalogQuery) -> Any:
    """Relay the vendor body verbatim."""
    return raw


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_image_url(item: Dict[str, Any]) -> Optional[str]:
    images = item.get("productImages") or item.get("productImageList") or []
    if isinstance(images, list):
        for image in images:
            if not isinstance(image, dict):
                continue
            url = image.get("url") or image.get("imageUrl") or image.get("imageURL")
            if url:
                return url
    return item.get("imageUrl")


def _map_product(item: Dict[str, Any]) -> Optional[Product]:
    part_number = item.get("ingramPartNumber") or item.get("vendorPartNumber")
    if not part_number:
        return None

    pricing = item.get("pricing") if isinstance(item.get("pricing"), dict) else {}
    availability = (
        item.get("availability") if isinstance(item.get("availability"), dict) else {}
    )

    return Product(
        id=str(part_number),
        sku=str(part_number),
        title=item.get("description") or item.get("extraDescription") or str(part_number),
        vendor_name=item.get("vendorName"),
        price=_as_float(pricing.get("customerPrice", item.get("price"))),
        currency=pricing.get("currencyCode") or item.get("currency"),
        stock=_as_int(availability.get("totalAvailability", item.get("stock"))),
        image_url=_first_image_url(item),
    )


def normalize_reseller_catalog(
    raw: Any, *, correlation_id: str, query: CatalogQuery
) -> Dict[str, Any]:
    """Map a reseller catalog payload onto the ``CatalogResponse`` contract."""
    if not isinstance(raw, dict):
        raw = {}

    if "items" in raw:
        response = CatalogResponse.model_validate(raw)
        if not response.correlation_id:
            response.correlation_id = correlation_id
        return response.to_payload()

    page = _as_int(raw.get("pageNumber"), _as_int(query.page_number, 1)) or 1
    page_size = _as_int(raw.get("pageSize"), _as_int(query.page_size, 0)) or 0

    items: List[Product] = []
    seen: set[str] = set()
    for entry in raw.get("catalog") or []:
        if not isinstance(entry, dict):
            continue
        product = _map_product(entry)
        if product is None or product.id in seen:
            continue
        seen.add(product.id)
        items.append(product)

    total_items = _as_int(raw.get("recordsFound"))
    total_pages = None
    if total_items is not None and page_size > 0:
        total_pages = math.ceil(total_items / page_size)

    logger.debug("Normalized %s catalog entries for %s", len(items), correlation_id)
    return CatalogResponse(
        correlation_id=correlation_id,
        items=items,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_items=total_items,
    ).to_payload()


TRANSFORMS: Dict[str, CatalogTransform] = {
    "passthrough": passthrough,
    "normalized": normalize_reseller_catalog,
}


def get_transform(mode: str) -> CatalogTransform:
    try:
        return TRANSFORMS[mode]
    except KeyError as exc:
        raise ValueError(f"Unknown catalog response mode: {mode}") from exc


__all__ = [
    "CatalogTransform",
    "TRANSFORMS",
    "get_transform",
    "normalize_reseller_catalog",
    "passthrough",
]
