"""
Customization records for bracelets built in the visual customizer.

A record is what the shopper picked: a word, a letter color, charms and a
band size. This module validates a record against the store limits, prices
a cart line carrying one, and projects it into the label/value pairs shown
on carts, orders and receipts.

Nothing here touches the database or the Flask app. Store settings are
always passed in by the caller.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

# payload key -> record field
PAYLOAD_KEYS = {
    "word": "word",
    "letterColor": "letter_color",
    "letter_color": "letter_color",
    "selectedCharms": "selected_charms",
    "selected_charms": "selected_charms",
    "size": "size",
}


# ----------------------------
# ERRORS
# ----------------------------
class CustomizationError(Exception):
    """Base class for every rejected customization."""

    code = "invalid_customization"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCustomization(CustomizationError):
    """Payload is not a customization record (unknown keys, bad types)."""

    code = "invalid_customization"


class WordTooShort(CustomizationError):
    code = "word_too_short"


class WordTooLong(CustomizationError):
    code = "word_too_long"


class InvalidLetterColor(CustomizationError):
    code = "invalid_letter_color"


# ----------------------------
# RECORD
# ----------------------------
@dataclass(frozen=True)
class Charm:
    id: str
    name: str
    price: Decimal = Decimal("0")

    @classmethod
    def from_payload(cls, data: Any) -> "Charm":
        if not isinstance(data, dict):
            raise InvalidCustomization("Each charm must be an object.")

        raw_price = data.get("price", 0)
        if isinstance(raw_price, bool):
            raise InvalidCustomization("Charm price must be a number.")
        try:
            price = Decimal(str(raw_price if raw_price is not None else 0))
        except InvalidOperation:
            raise InvalidCustomization("Charm price must be a number.")
        if not price.is_finite():
            raise InvalidCustomization("Charm price must be a number.")
        if price < 0:
            raise InvalidCustomization("Charm price cannot be negative.")

        charm_id = str(data.get("id") or "").strip()
        name = str(data.get("name") or charm_id).strip()
        return cls(id=charm_id or name, name=name, price=price)

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": str(self.price)}


def _text(value: Any) -> Optional[str]:
    # structured values count as absent, empty strings stay for validation
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).strip()


def _text_or_none(value: Any) -> Optional[str]:
    return _text(value) or None


@dataclass(frozen=True)
class CustomizationRecord:
    """
    One shopper's bracelet design.

    Records are frozen. Editing a design on a cart line means a new record
    on a new cart line.
    """

    word: Optional[str] = None
    letter_color: Optional[str] = None
    selected_charms: Tuple[Charm, ...] = field(default_factory=tuple)
    size: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "CustomizationRecord":
        """
        Build a record from the customizer JSON.

        Accepts the camelCase keys the customizer sends plus the older
        snake_case spellings. Any other key is rejected.
        """
        if not isinstance(payload, dict):
            raise InvalidCustomization("Customization must be an object.")

        unknown = sorted(k for k in payload if k not in PAYLOAD_KEYS)
        if unknown:
            raise InvalidCustomization(
                "Unknown customization field(s): " + ", ".join(unknown)
            )

        values: Dict[str, Any] = {}
        for key, value in payload.items():
            name = PAYLOAD_KEYS[key]
            if name in values and values[name] is not None:
                raise InvalidCustomization(f"Field given twice: {name}")
            values[name] = value

        charms_raw = values.get("selected_charms") or []
        if not isinstance(charms_raw, (list, tuple)):
            raise InvalidCustomization("selectedCharms must be a list.")

        return cls(
            word=_text(values.get("word")),
            letter_color=_text(values.get("letter_color")),
            selected_charms=tuple(Charm.from_payload(c) for c in charms_raw),
            size=_text_or_none(values.get("size")),
        )

    def to_payload(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.word is not None:
            data["word"] = self.word
        if self.letter_color is not None:
            data["letterColor"] = self.letter_color
        data["selectedCharms"] = [c.to_payload() for c in self.selected_charms]
        if self.size is not None:
            data["size"] = self.size
        return data


# ----------------------------
# VALIDATION
# ----------------------------
def validate(record: CustomizationRecord, settings) -> None:
    """
    Check a record against the store limits.

    Returns None when the record may go into the cart, otherwise raises
    WordTooShort, WordTooLong or InvalidLetterColor. Word checks come
    first, so a record that breaks both reports the word.
    """
    if record.word is not None:
        length = len(record.word)
        if length < settings.min_word_length:
            raise WordTooShort(
                f"Word must be at least {settings.min_word_length} characters long."
            )
        if length > settings.max_word_length:
            raise WordTooLong(
                f"Word cannot be longer than {settings.max_word_length} characters."
            )

    if record.letter_color is not None:
        color = settings.letter_colors.get(record.letter_color)
        if color is None or not color.enabled:
            raise InvalidLetterColor("Invalid letter color selected.")


# ----------------------------
# PRICING
# ----------------------------
def resolve_price(base_price, record: CustomizationRecord, settings) -> Decimal:
    """
    Unit price of a customized line: base + letter color surcharge + charms.

    Always computed from the product's base price, so running it on every
    totals pass gives the same answer. No rounding happens here.
    """
    price = Decimal(str(base_price))
    price += settings.color_surcharge(record.letter_color)
    for charm in record.selected_charms:
        price += charm.price
    return price


def format_price(amount, settings) -> str:
    exponent = Decimal(1).scaleb(-settings.price_decimals)
    return str(Decimal(str(amount)).quantize(exponent, rounding=ROUND_HALF_UP))


# ----------------------------
# DISPLAY
# ----------------------------
def _ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def project(record: CustomizationRecord) -> List[Tuple[str, str]]:
    """Label/value pairs for carts, order lines and receipts."""
    pairs = []
    if record.word:
        pairs.append(("Word", record.word.upper()))
    if record.letter_color:
        pairs.append(("Letter Color", _ucfirst(record.letter_color)))
    if record.selected_charms:
        pairs.append(("Charms", ", ".join(c.name for c in record.selected_charms)))
    if record.size:
        pairs.append(("Size", record.size.upper()))
    return pairs


def summarize(record: CustomizationRecord) -> List[str]:
    # short form for the admin order listing
    parts = []
    if record.word:
        parts.append(record.word.upper())
    if record.letter_color:
        parts.append(f"{_ucfirst(record.letter_color)} letters")
    if record.selected_charms:
        parts.append(f"{len(record.selected_charms)} charm(s)")
    return parts
