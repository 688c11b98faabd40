"""Tests for key derivation and label formatting."""

from models.category import FieldDefinition
from utils.labels import derive_key, format_label


class TestDeriveKey:
    def test_lowercases_and_joins_words(self):
        assert derive_key("My Comics") == "my_comics"

    def test_deterministic(self):
        assert derive_key("Release Year") == derive_key("Release Year")

    def test_whitespace_runs_collapse(self):
        assert derive_key("Box\t  Set") == "box_set"

    def test_other_characters_kept(self):
        assert derive_key("Cards (Pokémon)") == "cards_(pokémon)"

    def test_field_name_derived_from_stripped_label(self):
        field = FieldDefinition.from_label("  Purchase Price ", "number")
        assert field.name == "purchase_price"
        assert field.label == "Purchase Price"


class TestFormatLabel:
    def test_snake_case(self):
        assert format_label("purchase_date") == "Purchase Date"

    def test_camel_case(self):
        assert format_label("purchaseDate") == "Purchase Date"

    def test_single_word(self):
        assert format_label("grade") == "Grade"

    def test_extra_underscores_ignored(self):
        assert format_label("_mint__condition_") == "Mint Condition"
