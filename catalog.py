"""
Product data for the customizer.

Two sources provide the same listings: LiveCatalog reads the product table,
StaticFallbackCatalog serves the hardcoded lists in product_catalogs.py.
CatalogSelector decides which one answers a request.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

import product_catalogs
from models import Product

logger = logging.getLogger(__name__)


def charm_category_slug(category: Optional[str]) -> Optional[str]:
    """Map a charm tab name ("By Vibe") or slug to the stored slug. None means all."""
    if not category or category == "All":
        return None
    if category in product_catalogs.CHARM_CATEGORY_MAP:
        return product_catalogs.CHARM_CATEGORY_MAP[category]
    return category.strip().lower().replace(" ", "-")


def bracelet_category_slug(category: Optional[str]) -> Optional[str]:
    if not category or category == "All":
        return None
    return category.strip().lower()


class CatalogSource(Protocol):
    def bracelets(self, category=None, bestsellers_only=False) -> List[Dict[str, Any]]:
        ...

    def charms(self, category=None, new_only=False) -> List[Dict[str, Any]]:
        ...

    def collabs(self) -> List[Dict[str, Any]]:
        ...


# ----------------------------
# LIVE
# ----------------------------
class LiveCatalog:
    """Published rows of the product table."""

    def __init__(self, settings):
        self.settings = settings

    def _active(self, product_type):
        return Product.query.filter_by(product_type=product_type, is_active=True)

    def bracelets(self, category=None, bestsellers_only=False):
        query = self._active("standard_bracelet")
        slug = bracelet_category_slug(category)
        if slug:
            query = query.filter_by(category=slug)
        if bestsellers_only:
            query = query.filter_by(is_bestseller=True)
        return [self._bracelet_dict(p) for p in query.order_by(Product.id).all()]

    def charms(self, category=None, new_only=False):
        query = self._active("charm")
        slug = charm_category_slug(category)
        if slug:
            query = query.filter_by(category=slug)
        if new_only:
            query = query.filter_by(is_new=True)
        return [self._charm_dict(p) for p in query.order_by(Product.id).all()]

    def collabs(self):
        query = self._active("collab").order_by(Product.id)
        return [self._bracelet_dict(p) for p in query.all()]

    def _bracelet_dict(self, product):
        return {
            "id": product.slug,
            "productId": product.id,
            "name": product.name,
            "description": product.description or "",
            "basePrice": float(product.price or 0),
            "image": product.image_url or "",
            "availableSizes": product.size_list() or list(self.settings.default_sizes),
            "isBestSeller": bool(product.is_bestseller),
            "category": product.category or "standard",
            "slug": product.slug,
        }

    def _charm_dict(self, product):
        return {
            "id": product.slug,
            "productId": product.id,
            "name": product.name,
            "description": product.description or "",
            "price": float(product.price or 0),
            "image": product.image_url or "",
            "isNew": bool(product.is_new),
            "category": product.category or "bestsellers",
            "vibe": product.vibe or "",
            "tags": product.tag_list(),
            "slug": product.slug,
        }


# ----------------------------
# FALLBACK
# ----------------------------
class StaticFallbackCatalog:
    """Hardcoded listings from product_catalogs.py."""

    def bracelets(self, category=None, bestsellers_only=False):
        items = list(product_catalogs.BRACELET_PRODUCTS)
        slug = bracelet_category_slug(category)
        if slug:
            items = [b for b in items if b["category"] == slug]
        if bestsellers_only:
            items = [b for b in items if b["isBestSeller"]]
        return [dict(b) for b in items]

    def charms(self, category=None, new_only=False):
        items = list(product_catalogs.CHARM_PRODUCTS)
        slug = charm_category_slug(category)
        if slug:
            items = [c for c in items if c["category"] == slug]
        if new_only:
            items = [c for c in items if c["isNew"]]
        return [dict(c) for c in items]

    def collabs(self):
        return [dict(c) for c in product_catalogs.COLLAB_PRODUCTS]


# ----------------------------
# SELECTION POLICY
# ----------------------------
@dataclass
class CatalogResult:
    items: List[Dict[str, Any]]
    source: str

    def to_dict(self):
        return {
            "success": True,
            "data": self.items,
            "source": self.source,
            "total": len(self.items),
        }


class CatalogSelector:
    """
    Picks the catalog source for each listing.

    - live listing not empty      -> live items, source "live"
    - live listing empty          -> fallback items, source "fallback"
    - live source raised a DB error -> fallback items, source "fallback_error"

    Filters are passed unchanged to whichever source answers.
    """

    def __init__(self, live: CatalogSource, fallback: CatalogSource):
        self.live = live
        self.fallback = fallback

    def _select(self, listing, **filters):
        try:
            items = getattr(self.live, listing)(**filters)
        except SQLAlchemyError as e:
            logger.warning("Live %s listing failed, using fallback: %s", listing, e)
            return CatalogResult(getattr(self.fallback, listing)(**filters), "fallback_error")

        if items:
            return CatalogResult(items, "live")

        logger.info("No live %s found, using fallback data", listing)
        return CatalogResult(getattr(self.fallback, listing)(**filters), "fallback")

    def bracelets(self, category=None, bestsellers_only=False):
        return self._select("bracelets", category=category, bestsellers_only=bestsellers_only)

    def charms(self, category=None, new_only=False):
        return self._select("charms", category=category, new_only=new_only)

    def collabs(self):
        return self._select("collabs")
