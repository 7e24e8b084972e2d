"""
Hardcoded bracelet, charm and collab catalog.
Served when the product table has nothing to offer, and used by
seed_products.py to fill an empty database.
"""

# ======================================================
# 1. SHARED VALUES
# ======================================================

IMAGE_ROOT = "/static/images"

DEFAULT_SIZES = ["XS", "S/M", "M/L", "L/XL"]

# display name -> stored slug
CHARM_CATEGORY_MAP = {
    "Bestsellers": "bestsellers",
    "New Drops & Favs": "new-drops",
    "By Vibe": "by-vibe",
}


def _bracelet_image(name):
    return f"{IMAGE_ROOT}/bracelets/{name}"


def _charm_image(name):
    return f"{IMAGE_ROOT}/charms/{name}"


# ======================================================
# 2. BRACELETS
# ======================================================

BRACELET_PRODUCTS = [
    {
        "id": "gold-plated",
        "name": "Gold Plated",
        "image": _bracelet_image("gold-plated.webp"),
        "basePrice": 0,
        "isBestSeller": True,
        "category": "standard",
        "availableSizes": DEFAULT_SIZES,
    },
    {
        "id": "bluestone",
        "name": "Bluestone",
        "image": _bracelet_image("bluestone.webp"),
        "gapImages": {
            str(n): _bracelet_image(f"bluestone-{n}char.webp") for n in range(2, 14)
        },
        "basePrice": 0,
        "isBestSeller": True,
        "category": "standard",
        "availableSizes": DEFAULT_SIZES,
    },
    {
        "id": "amethyst-dreams",
        "name": "Amethyst Dreams",
        "image": _bracelet_image("amethyst-dreams.webp"),
        "basePrice": 5,
        "isBestSeller": False,
        "category": "special",
        "availableSizes": DEFAULT_SIZES,
    },
    {
        "id": "rose-gold",
        "name": "Rose Gold",
        "image": _bracelet_image("rose-gold.webp"),
        "basePrice": 10,
        "isBestSeller": False,
        "category": "special",
        "availableSizes": DEFAULT_SIZES,
    },
]

# ======================================================
# 3. CHARMS
# ======================================================

CHARM_PRODUCTS = [
    {
        "id": "teacher",
        "name": "#1 Teacher",
        "image": _charm_image("teacher-banner.jpg"),
        "price": 14,
        "isNew": True,
        "category": "bestsellers",
    },
    {
        "id": "heart",
        "name": "Heart",
        "image": _charm_image("apple.jpg"),
        "price": 12,
        "isNew": False,
        "category": "bestsellers",
    },
    {
        "id": "star",
        "name": "Star",
        "image": _charm_image("paint-palette.jpg"),
        "price": 10,
        "isNew": False,
        "category": "by-vibe",
    },
    {
        "id": "moon",
        "name": "Moon",
        "image": _charm_image("moon.png"),
        "price": 13,
        "isNew": True,
        "category": "new-drops",
    },
    {
        "id": "butterfly",
        "name": "Butterfly",
        "image": _charm_image("butterfly.png"),
        "price": 15,
        "isNew": False,
        "category": "by-vibe",
    },
    {
        "id": "anchor",
        "name": "Anchor",
        "image": _charm_image("anchor.png"),
        "price": 11,
        "isNew": False,
        "category": "bestsellers",
    },
]

# ======================================================
# 4. COLLABS
# ======================================================

# Collab bracelets only exist once an admin creates them.
COLLAB_PRODUCTS = []

# ======================================================
# 5. REGISTRIES
# ======================================================

ALL_BRACELETS = {b["id"]: b for b in BRACELET_PRODUCTS}
ALL_CHARMS = {c["id"]: c for c in CHARM_PRODUCTS}
