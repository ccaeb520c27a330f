"""
Unit tests for search and alternatives matching rules.
"""

from app.services.lookup.catalog import (
    alternative_criteria,
    is_alternative,
    matches_query,
    split_list,
)
from tests.doubles import make_record


class TestSearchMatching:

    def test_matches_name_brand_or_category(self):
        record = make_record(name="Maple Syrup", brand="AcmeCo", category="Breakfast, Syrups")

        assert matches_query(record, "maple")
        assert matches_query(record, "ACME")
        assert matches_query(record, "syrups")
        assert not matches_query(record, "ketchup")

    def test_split_list_drops_empty_parts(self):
        assert split_list(" Snacks, ,Chips ,") == ["Snacks", "Chips"]
        assert split_list("") == []


class TestAlternatives:

    def test_criteria_use_first_brand(self):
        record = make_record(brand="BigCo, Other", category="Soft drinks, Beverages")
        assert alternative_criteria(record) == (["Soft drinks", "Beverages"], "BigCo")

    def test_criteria_empty(self):
        assert alternative_criteria(make_record(brand="", category="")) == ([], None)

    def test_shared_category(self):
        candidate = make_record(barcode="2", category="Beverages", countries="Canada")
        assert is_alternative(candidate, "1", ["Beverages"], None)

    def test_brand_is_optional_match_with_categories(self):
        candidate = make_record(barcode="2", brand="BigCo Canada", category="Snacks", countries="Canada")
        assert is_alternative(candidate, "1", ["Beverages"], "bigco")

    def test_brand_only(self):
        candidate = make_record(barcode="2", brand="Tiny", countries="Canada")
        assert not is_alternative(candidate, "1", [], "BigCo")

    def test_non_canadian_or_same_product_excluded(self):
        foreign = make_record(barcode="2", category="Beverages", countries="USA")
        same = make_record(barcode="1", category="Beverages", countries="Canada")

        assert not is_alternative(foreign, "1", ["Beverages"], None)
        assert not is_alternative(same, "1", ["Beverages"], None)

    def test_no_criteria_accepts_any_canadian_product(self):
        candidate = make_record(barcode="2", countries="Canada")
        assert is_alternative(candidate, "1", [], None)
