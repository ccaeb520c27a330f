"""
Unit tests for Canadian origin classification.
"""

from app.services.lookup.interfaces import CountryFields, SourceTag
from app.services.lookup.origin import (
    corroboration_confidence,
    has_canadian_phrase,
    is_canadian,
    mentions_canada,
)
from tests.doubles import make_record


class TestOriginClassifier:
    """Keyword rule over countries, manufacturing places and origins."""

    def test_countries_canada(self):
        assert is_canadian(CountryFields(countries="Canada")) is True

    def test_countries_united_states(self):
        assert is_canadian(CountryFields(countries="United States")) is False

    def test_manufacturing_place_is_case_insensitive(self):
        assert is_canadian(CountryFields(manufacturing_places="Made in CANADA")) is True

    def test_origins_only(self):
        assert is_canadian(CountryFields(origins="Ontario, Canada")) is True

    def test_empty_fields(self):
        assert is_canadian(CountryFields()) is False

    def test_accepts_product_record(self):
        assert is_canadian(make_record(countries="en:canada")) is True
        assert is_canadian(make_record(countries="France")) is False

    def test_mentions_canada_ignores_other_text(self):
        assert mentions_canada(CountryFields(countries="France, Belgium", origins="Italy")) is False


class TestRecordOrigin:
    """is_canadian on ProductRecord is derived, never stored."""

    def test_record_uses_country_fields(self):
        assert make_record(countries="Canada").is_canadian is True
        assert make_record(countries="Mexico").is_canadian is False

    def test_web_signal_is_or_combined(self):
        record = make_record(source=SourceTag.WEB_SEARCH, web_origin_signal=True)
        assert record.is_canadian is True

    def test_canadian_factors(self):
        record = make_record(countries="Canada")
        assert record.canadian_factors() == {
            "countries": True,
            "manufacturing": False,
            "origins": False,
        }


class TestCorroborationConfidence:
    """Ratio of search results mentioning Canadian manufacture."""

    def test_two_of_five(self):
        texts = [
            "Maple Syrup - Made in Canada",
            "Proudly Canadian made syrup",
            "Buy maple syrup online",
            "Maple syrup recipes",
            "Syrup reviews",
        ]
        assert corroboration_confidence(texts) == 0.4

    def test_one_of_five(self):
        texts = ["Product of Canada", "a", "b", "c", "d"]
        assert corroboration_confidence(texts) == 0.2

    def test_no_results(self):
        assert corroboration_confidence([]) == 0.0

    def test_phrases(self):
        assert has_canadian_phrase("MADE IN CANADA since 1920")
        assert has_canadian_phrase("a product of canada")
        assert not has_canadian_phrase("Canada Dry ginger ale")
