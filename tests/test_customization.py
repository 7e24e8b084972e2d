"""Tests for customization records: validation, pricing and projection."""

from decimal import Decimal

import pytest

from customization import (
    Charm,
    CustomizationRecord,
    InvalidCustomization,
    InvalidLetterColor,
    WordTooLong,
    WordTooShort,
    format_price,
    project,
    resolve_price,
    summarize,
    validate,
)
from settings import LetterColor, StoreSettings


@pytest.fixture
def settings():
    return StoreSettings()


def _charms(*prices):
    return tuple(Charm(id=f"c{i}", name=f"Charm {i}", price=Decimal(str(p)))
                 for i, p in enumerate(prices))


class TestFromPayload:
    """Tests for building records from customizer JSON."""

    def test_camel_case_payload(self) -> None:
        """Customizer keys map onto record fields."""
        record = CustomizationRecord.from_payload({
            "word": "mia",
            "letterColor": "gold",
            "selectedCharms": [{"id": "heart", "name": "Heart", "price": "12.50"}],
            "size": "M/L",
        })
        assert record.word == "mia"
        assert record.letter_color == "gold"
        assert record.selected_charms == (Charm("heart", "Heart", Decimal("12.50")),)
        assert record.size == "M/L"

    def test_snake_case_aliases(self) -> None:
        """Older snake_case keys are accepted."""
        record = CustomizationRecord.from_payload({
            "letter_color": "pink",
            "selected_charms": [{"id": "moon", "name": "Moon", "price": 13}],
        })
        assert record.letter_color == "pink"
        assert record.selected_charms[0].price == Decimal("13")

    def test_unknown_field_rejected(self) -> None:
        """Arbitrary keys are not silently accepted."""
        with pytest.raises(InvalidCustomization) as exc:
            CustomizationRecord.from_payload({"word": "mia", "font": "serif"})
        assert "font" in exc.value.message

    def test_same_field_twice_rejected(self) -> None:
        with pytest.raises(InvalidCustomization):
            CustomizationRecord.from_payload({"letterColor": "gold", "letter_color": "pink"})

    def test_negative_charm_price_rejected(self) -> None:
        with pytest.raises(InvalidCustomization):
            CustomizationRecord.from_payload({"selectedCharms": [{"name": "Bad", "price": -1}]})

    def test_non_numeric_charm_price_rejected(self) -> None:
        with pytest.raises(InvalidCustomization):
            CustomizationRecord.from_payload({"selectedCharms": [{"name": "Bad", "price": "free"}]})

    def test_not_a_dict_rejected(self) -> None:
        with pytest.raises(InvalidCustomization):
            CustomizationRecord.from_payload(["mia"])

    def test_structured_text_fields_are_absent(self) -> None:
        record = CustomizationRecord.from_payload({"word": {"x": 1}, "size": ["XS"]})
        assert record.word is None
        assert record.size is None

    def test_empty_word_and_color_are_kept(self) -> None:
        """An empty word or color is still a value, so validation sees it."""
        record = CustomizationRecord.from_payload({"word": "   ", "letterColor": ""})
        assert record.word == ""
        assert record.letter_color == ""
        assert project(record) == []

    def test_non_finite_charm_price_rejected(self) -> None:
        with pytest.raises(InvalidCustomization, match="must be a number"):
            CustomizationRecord.from_payload({"selectedCharms": [{"id": "x", "price": "NaN"}]})
        with pytest.raises(InvalidCustomization, match="must be a number"):
            Charm.from_payload({"id": "x", "price": "Infinity"})

    def test_word_is_stripped(self) -> None:
        record = CustomizationRecord.from_payload({"word": "  mia "})
        assert record.word == "mia"

    def test_payload_round_trip_is_canonical(self) -> None:
        """to_payload always uses camelCase keys."""
        record = CustomizationRecord.from_payload({
            "word": "mia",
            "letter_color": "gold",
            "selected_charms": [{"id": "heart", "name": "Heart", "price": 12}],
        })
        assert record.to_payload() == {
            "word": "mia",
            "letterColor": "gold",
            "selectedCharms": [{"id": "heart", "name": "Heart", "price": "12"}],
        }
        assert CustomizationRecord.from_payload(record.to_payload()) == record

    def test_record_is_frozen(self) -> None:
        record = CustomizationRecord(word="mia")
        with pytest.raises(AttributeError):
            record.word = "zoe"


class TestValidate:
    """Tests for validate()."""

    def test_valid_record(self, settings) -> None:
        """A record within limits passes."""
        record = CustomizationRecord(word="MIA", letter_color="gold")
        assert validate(record, settings) is None

    def test_word_too_short(self, settings) -> None:
        with pytest.raises(WordTooShort) as exc:
            validate(CustomizationRecord(word="A"), settings)
        assert exc.value.code == "word_too_short"

    def test_word_too_long(self, settings) -> None:
        """14 characters is over the default maximum of 13."""
        with pytest.raises(WordTooLong) as exc:
            validate(CustomizationRecord(word="ABCDEFGHIJKLMN"), settings)
        assert exc.value.code == "word_too_long"

    def test_word_length_bounds_inclusive(self, settings) -> None:
        validate(CustomizationRecord(word="AB"), settings)
        validate(CustomizationRecord(word="ABCDEFGHIJKLM"), settings)

    def test_custom_limits(self) -> None:
        settings = StoreSettings(min_word_length=4, max_word_length=6)
        with pytest.raises(WordTooShort):
            validate(CustomizationRecord(word="MIA"), settings)
        with pytest.raises(WordTooLong):
            validate(CustomizationRecord(word="ABCDEFG"), settings)

    def test_unknown_letter_color(self, settings) -> None:
        with pytest.raises(InvalidLetterColor) as exc:
            validate(CustomizationRecord(word="MIA", letter_color="purple"), settings)
        assert exc.value.code == "invalid_letter_color"

    def test_disabled_letter_color(self) -> None:
        settings = StoreSettings(letter_colors={
            "white": LetterColor("white", "White"),
            "gold": LetterColor("gold", "Gold", Decimal("15"), enabled=False),
        })
        with pytest.raises(InvalidLetterColor):
            validate(CustomizationRecord(letter_color="gold"), settings)

    def test_word_checked_before_color(self, settings) -> None:
        """A record breaking both rules reports the word."""
        with pytest.raises(WordTooShort):
            validate(CustomizationRecord(word="A", letter_color="purple"), settings)

    def test_no_word_skips_word_checks(self, settings) -> None:
        validate(CustomizationRecord(size="XS"), settings)

    @pytest.mark.parametrize("word", ["", "   "])
    def test_empty_word_too_short(self, settings, word) -> None:
        record = CustomizationRecord.from_payload({"word": word, "size": "XS"})
        with pytest.raises(WordTooShort):
            validate(record, settings)

    def test_empty_letter_color_rejected(self, settings) -> None:
        record = CustomizationRecord.from_payload({"word": "MIA", "letterColor": ""})
        with pytest.raises(InvalidLetterColor):
            validate(record, settings)

    def test_null_word_skips_word_checks(self, settings) -> None:
        validate(CustomizationRecord.from_payload({"word": None, "size": "XS"}), settings)


class TestResolvePrice:
    """Tests for resolve_price()."""

    def test_gold_and_charms(self, settings) -> None:
        """20 + 15 (gold) + 14 + 12 = 61."""
        record = CustomizationRecord(letter_color="gold", selected_charms=_charms(14, 12))
        assert resolve_price(20, record, settings) == Decimal("61")

    def test_white_no_charms_is_base(self, settings) -> None:
        record = CustomizationRecord(letter_color="white")
        assert resolve_price(20, record, settings) == Decimal("20")

    def test_empty_record_is_base_exactly(self, settings) -> None:
        assert resolve_price(Decimal("19.99"), CustomizationRecord(), settings) == Decimal("19.99")

    def test_idempotent(self, settings) -> None:
        """Repeated calls give the same price, nothing accumulates."""
        record = CustomizationRecord(letter_color="gold", selected_charms=_charms(10))
        first = resolve_price(20, record, settings)
        second = resolve_price(20, record, settings)
        assert first == second == Decimal("45")

    def test_unknown_color_has_no_surcharge(self, settings) -> None:
        """The resolver does not re-validate."""
        record = CustomizationRecord(letter_color="purple")
        assert resolve_price(20, record, settings) == Decimal("20")

    def test_configured_surcharge(self) -> None:
        settings = StoreSettings(letter_colors={
            "silver": LetterColor("silver", "Silver", Decimal("7.50")),
        })
        record = CustomizationRecord(letter_color="silver")
        assert resolve_price(10, record, settings) == Decimal("17.50")

    def test_no_rounding_before_display(self, settings) -> None:
        record = CustomizationRecord(selected_charms=_charms("0.005", "0.005"))
        price = resolve_price(1, record, settings)
        assert price == Decimal("1.010")
        assert format_price(price, settings) == "1.01"


class TestFormatPrice:
    def test_two_decimals(self, settings) -> None:
        assert format_price(Decimal("61"), settings) == "61.00"

    def test_rounds_half_up(self, settings) -> None:
        assert format_price(Decimal("2.345"), settings) == "2.35"

    def test_zero_decimals(self) -> None:
        assert format_price(Decimal("9.5"), StoreSettings(price_decimals=0)) == "10"


class TestProject:
    """Tests for project()."""

    def test_full_record(self) -> None:
        record = CustomizationRecord(
            word="mia",
            letter_color="gold",
            selected_charms=(Charm("heart", "Heart", Decimal("12")),),
            size="m/l",
        )
        assert project(record) == [
            ("Word", "MIA"),
            ("Letter Color", "Gold"),
            ("Charms", "Heart"),
            ("Size", "M/L"),
        ]

    def test_charms_comma_joined(self) -> None:
        record = CustomizationRecord(selected_charms=_charms(1, 2))
        assert project(record) == [("Charms", "Charm 0, Charm 1")]

    def test_empty_fields_omitted_order_kept(self) -> None:
        """Missing fields drop out; the rest keep word, color, charms, size order."""
        record = CustomizationRecord(size="xs", word="zoe")
        assert project(record) == [("Word", "ZOE"), ("Size", "XS")]

    def test_empty_record(self) -> None:
        assert project(CustomizationRecord()) == []

    def test_reproducible(self) -> None:
        record = CustomizationRecord(word="mia", letter_color="pink")
        assert project(record) == project(record)


class TestSummarize:
    def test_summary(self) -> None:
        record = CustomizationRecord(word="mia", letter_color="gold", selected_charms=_charms(1, 2))
        assert summarize(record) == ["MIA", "Gold letters", "2 charm(s)"]

    def test_empty(self) -> None:
        assert summarize(CustomizationRecord()) == []
