"""
Store settings for the bracelet customizer.

Priority (highest to lowest):
1. Explicit kwargs passed to load_settings()
2. Environment variables (BRACELET_*)
3. YAML config file, `store:` section (if provided)
4. Default values

Example bracelet.config.yaml:
```yaml
store:
  min_word_length: 2
  max_word_length: 13
  currency: USD
  letter_colors:
    white: {name: White, price: 0, color: "#ffffff"}
    gold: {name: Gold, price: 15, color: "#ffd700"}
    silver: {name: Silver, price: 5, color: "#c0c0c0", enabled: false}
```
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


@dataclass(frozen=True)
class LetterColor:
    id: str
    name: str
    price: Decimal = Decimal("0")
    color: str = "#ffffff"
    enabled: bool = True

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "color": self.color,
        }


def default_letter_colors() -> Dict[str, LetterColor]:
    return {
        "white": LetterColor("white", "White", Decimal("0"), "#ffffff"),
        "pink": LetterColor("pink", "Pink", Decimal("0"), "#ffc0cb"),
        "black": LetterColor("black", "Black", Decimal("0"), "#000000"),
        "gold": LetterColor("gold", "Gold", Decimal("15"), "#ffd700"),
    }


@dataclass(frozen=True)
class StoreSettings:
    """
    Limits and prices the customizer rules depend on.

    Attributes:
        min_word_length: Shortest word accepted on a bracelet (default: 2).
        max_word_length: Longest word accepted on a bracelet (default: 13).
        letter_colors: Color id -> LetterColor, disabled colors included.
        price_decimals: Fraction digits used when a price is displayed.
        currency: ISO currency code shown to the customizer.
        default_sizes: Band sizes for bracelets that don't list their own.
        button_label: Text of the "customize" button on product pages.
    """

    min_word_length: int = 2
    max_word_length: int = 13
    letter_colors: Dict[str, LetterColor] = field(default_factory=default_letter_colors)
    price_decimals: int = 2
    currency: str = "USD"
    default_sizes: Tuple[str, ...] = ("XS", "S/M", "M/L", "L/XL")
    button_label: str = "Customize This Bracelet"

    def __post_init__(self):
        if self.min_word_length < 1:
            raise ValueError("min_word_length must be at least 1")
        if self.min_word_length > self.max_word_length:
            raise ValueError("min_word_length cannot exceed max_word_length")
        if self.price_decimals < 0:
            raise ValueError("price_decimals cannot be negative")

    def enabled_colors(self):
        return [c for c in self.letter_colors.values() if c.enabled]

    def color_surcharge(self, color_id: Optional[str]) -> Decimal:
        if not color_id:
            return Decimal("0")
        color = self.letter_colors.get(color_id)
        return color.price if color else Decimal("0")

    def to_public_dict(self) -> Dict[str, Any]:
        """Settings the front-end customizer is allowed to see."""
        return {
            "minWordLength": self.min_word_length,
            "maxWordLength": self.max_word_length,
            "letterColors": [c.to_public_dict() for c in self.enabled_colors()],
            "currency": {"code": self.currency, "decimals": self.price_decimals},
            "availableSizes": list(self.default_sizes),
            "buttonLabels": {"customize": self.button_label},
        }


def _load_yaml_config(config_file) -> Dict[str, Any]:
    path = Path(config_file)
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    section = data.get("store")
    return section if isinstance(section, dict) else {}


def _parse_surcharge(color_id, value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValueError(f"letter color {color_id!r}: price must be a number")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"letter color {color_id!r}: price must be a number")
    if not price.is_finite() or price < 0:
        raise ValueError(f"letter color {color_id!r}: price must be a non-negative number")
    return price


def _parse_letter_colors(raw: Dict[str, Any]) -> Dict[str, LetterColor]:
    colors = {}
    for color_id, data in raw.items():
        data = data or {}
        colors[color_id] = LetterColor(
            id=color_id,
            name=data.get("name") or color_id[:1].upper() + color_id[1:],
            price=_parse_surcharge(color_id, data.get("price", 0)),
            color=data.get("color", "#ffffff"),
            enabled=bool(data.get("enabled", True)),
        )
    return colors


def load_settings(config_file=None, **overrides: Any) -> StoreSettings:
    """
    Load store settings with priority: overrides > env vars > yaml > defaults.

    Example:
        settings = load_settings("bracelet.config.yaml", max_word_length=10)
    """
    config: Dict[str, Any] = {}

    # 1. YAML file
    if config_file:
        config.update(_load_yaml_config(config_file))

    # 2. Environment
    env_mapping = {
        "min_word_length": "BRACELET_MIN_WORD_LENGTH",
        "max_word_length": "BRACELET_MAX_WORD_LENGTH",
        "price_decimals": "BRACELET_PRICE_DECIMALS",
        "currency": "BRACELET_CURRENCY",
    }
    for key, env_var in env_mapping.items():
        if env_val := os.getenv(env_var):
            config[key] = env_val

    # 3. Explicit kwargs
    config.update({k: v for k, v in overrides.items() if v is not None})

    # Type conversions
    for key in ("min_word_length", "max_word_length", "price_decimals"):
        if key in config:
            config[key] = int(config[key])
    if isinstance(config.get("letter_colors"), dict):
        raw = config["letter_colors"]
        if not all(isinstance(v, LetterColor) for v in raw.values()):
            config["letter_colors"] = _parse_letter_colors(raw)
    if "default_sizes" in config:
        config["default_sizes"] = tuple(config["default_sizes"])

    known = set(StoreSettings.__dataclass_fields__)
    return StoreSettings(**{k: v for k, v in config.items() if k in known})
