# seed_products.py
# Run: python3 seed_products.py [--dry-run]
#
# Reads the fallback lists in product_catalogs.py and inserts them into the
# Product table, so the live catalog has bracelets and charms to serve.
# - bracelets become customizable "standard_bracelet" rows
# - charms become "charm" rows
# - safe to re-run: rows whose slug already exists are skipped

import argparse
import re
from decimal import Decimal
from typing import Any, Dict, List

from app import create_app
from models import Product, db
from product_catalogs import BRACELET_PRODUCTS, CHARM_PRODUCTS


def _slugify(text: str) -> str:
    text = (text or "").strip().lower()
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


def _bracelet_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "slug": _slugify(item.get("id") or item["name"]),
        "name": item["name"],
        "product_type": "standard_bracelet",
        "price": Decimal(str(item.get("basePrice") or 0)),
        "category": item.get("category") or "standard",
        "sizes": ",".join(item.get("availableSizes") or []),
        "image_url": item.get("image") or "",
        "is_bestseller": bool(item.get("isBestSeller")),
        "customizable": True,
    }


def _charm_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "slug": _slugify(item.get("id") or item["name"]),
        "name": item["name"],
        "product_type": "charm",
        "price": Decimal(str(item.get("price") or 0)),
        "category": item.get("category") or "bestsellers",
        "image_url": item.get("image") or "",
        "is_new": bool(item.get("isNew")),
    }


def catalog_rows() -> List[Dict[str, Any]]:
    return [_bracelet_fields(b) for b in BRACELET_PRODUCTS] + [
        _charm_fields(c) for c in CHARM_PRODUCTS
    ]


def seed(dry_run=False):
    """Insert missing catalog rows. Returns (created, skipped)."""
    created = 0
    skipped = 0

    for data in catalog_rows():
        if Product.query.filter_by(slug=data["slug"]).first():
            skipped += 1
            continue

        if dry_run:
            print(f"[DRY] {data['slug']} | {data['name']} | {data['product_type']} | {data['price']}")
            continue

        db.session.add(Product(**data))
        created += 1

    if not dry_run:
        db.session.commit()

    return created, skipped


def main():
    parser = argparse.ArgumentParser(description="Seed the product table from the fallback catalog.")
    parser.add_argument("--dry-run", action="store_true", help="print rows instead of inserting")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        created, skipped = seed(dry_run=args.dry_run)

    print("Seeding finished")
    print(f"Inserted: {created}")
    print(f"Skipped: {skipped}")


if __name__ == "__main__":
    main()
