"""
Unit tests for per-source response normalization.
"""

import pytest

from app.services.lookup.extraction import ExtractedProduct
from app.services.lookup.interfaces import Citation, NormalizationError, SourceTag
from app.services.lookup.normalizers import (
    normalize_cached,
    normalize_go_upc,
    normalize_open_food_facts,
    normalize_upc_database,
    normalize_web_search,
)
from tests.doubles import FETCHED_AT, make_record

BARCODE = "0064100000015"


class TestOpenFoodFacts:

    def test_full_product(self):
        record = normalize_open_food_facts(BARCODE, {
            "product_name": "Pure Maple Syrup",
            "brands": "Acme",
            "image_url": "https://images.off/1.jpg",
            "categories": "Syrups, Sweeteners",
            "generic_name": "Grade A amber syrup",
            "ingredients_text": "maple syrup",
            "countries": "Canada, France",
            "manufacturing_places": "Quebec",
            "origins": "",
        }, fetched_at=FETCHED_AT)

        assert record.barcode == BARCODE
        assert record.name == "Pure Maple Syrup"
        assert record.brand == "Acme"
        assert record.description == "Grade A amber syrup"
        assert record.ingredients == "maple syrup"
        assert record.country_fields.countries == "Canada, France"
        assert record.provenance.source == SourceTag.PRIMARY_CATALOG
        assert record.provenance.fetched_at == FETCHED_AT
        assert record.provenance.confidence is None
        assert record.is_canadian is True

    def test_missing_fields_are_empty_strings(self):
        record = normalize_open_food_facts(BARCODE, {"product_name": None})

        assert record.name == ""
        assert record.brand == ""
        assert record.image_url == ""
        assert record.country_fields.origins == ""
        assert record.is_canadian is False

    def test_front_image_fallback(self):
        record = normalize_open_food_facts(BARCODE, {"image_front_url": "https://images.off/front.jpg"})
        assert record.image_url == "https://images.off/front.jpg"

    def test_not_an_object(self):
        with pytest.raises(NormalizationError):
            normalize_open_food_facts(BARCODE, ["not", "a", "product"])


class TestUPCDatabase:

    def test_images_array_and_country(self):
        record = normalize_upc_database(BARCODE, {
            "success": True,
            "data": {
                "title": "Organic Oats",
                "brand": "Farmco",
                "images": ["https://img/1.png", "https://img/2.png"],
                "category": "Cereal",
                "country": "Canada",
                "manufacturer": "Farmco Ltd",
            },
        })

        assert record.name == "Organic Oats"
        assert record.image_url == "https://img/1.png"
        assert record.country_fields.countries == "Canada"
        assert record.country_fields.origins == "Canada"
        assert record.country_fields.manufacturing_places == "Farmco Ltd"
        assert record.provenance.source == SourceTag.SECONDARY_A
        assert record.is_canadian is True

    def test_no_images(self):
        record = normalize_upc_database(BARCODE, {"data": {"title": "Oats", "images": []}})
        assert record.image_url == ""

    def test_missing_data_object(self):
        with pytest.raises(NormalizationError):
            normalize_upc_database(BARCODE, {"success": True})


class TestGoUPC:

    def test_region_and_single_image(self):
        record = normalize_go_upc(BARCODE, {
            "name": "Ketchup",
            "brand": "Heinz",
            "imageUrl": "https://go-upc/ketchup.jpg",
            "category": "Condiments",
            "region": "USA or Canada",
            "description": "Tomato ketchup",
            "ingredients": {"text": "tomatoes, vinegar"},
        })

        assert record.image_url == "https://go-upc/ketchup.jpg"
        assert record.country_fields.countries == "USA or Canada"
        assert record.ingredients == "tomatoes, vinegar"
        assert record.description == "Tomato ketchup"
        assert record.provenance.source == SourceTag.SECONDARY_B

    def test_region_outside_canada(self):
        record = normalize_go_upc(BARCODE, {"name": "Salsa", "region": "Mexico"})
        assert record.is_canadian is False


class TestWebSearch:

    def test_confidence_and_citations(self):
        citations = [Citation(title="Maple Syrup | AcmeCo", link="https://shop", snippet="...")]
        record = normalize_web_search(
            BARCODE,
            ExtractedProduct(name="Maple Syrup", brand="AcmeCo", category="Breakfast"),
            confidence=0.4,
            web_origin_signal=True,
            citations=citations,
        )

        assert record.name == "Maple Syrup"
        assert record.category == "Breakfast"
        assert record.country_fields.countries == ""
        assert record.provenance.source == SourceTag.WEB_SEARCH
        assert record.provenance.confidence == 0.4
        assert record.provenance.citations == citations
        assert record.is_canadian is True


class TestCached:

    def test_provenance_carried_forward(self):
        stored = make_record(countries="Canada", source=SourceTag.SECONDARY_B)
        record = normalize_cached(stored.to_dict())

        assert record == stored
        assert record.provenance.source == SourceTag.SECONDARY_B

    def test_invalid_payload(self):
        with pytest.raises(NormalizationError):
            normalize_cached({"barcode": BARCODE})
