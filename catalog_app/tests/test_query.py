from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from catalog_app.models import Product
from catalog_app.services import query
from core.enums import SortField, SortOrder
from core.schemas import PageRequest, ProductFilters


def make_product(pk, **overrides):
    defaults = {
        "id": pk,
        "name": f"Product {pk}",
        "sku": f"SKU-{pk}",
        "brand": "Acme",
        "category": "Tools",
        "supplier_id": 1,
        "cost_item": Decimal("10.00"),
        "active": True,
        "photo": None,
        "description": None,
    }
    defaults.update(overrides)
    return Product(**defaults)


@pytest.fixture()
def catalog():
    return [
        make_product(1, name="Cordless Drill", brand="Bosch", category="Tools", cost_item=Decimal("250.00"), photo="drill.jpg"),
        make_product(2, name="Hammer", brand="Tramontina", category="Tools", cost_item=Decimal("35.50")),
        make_product(3, name="Garden Hose", brand="Tramontina", category="Garden", cost_item=Decimal("80.00"), active=False),
        make_product(4, name="Drill Bits", sku="BITS-10", brand="Bosch", category="Accessories", supplier_id=2, cost_item="abc"),
    ]


def ids(products):
    return [product.id for product in products]


def test_no_filters_returns_everything_in_input_order(catalog):
    page = query.run_query(catalog, ProductFilters(), PageRequest(limit=50))
    assert ids(page.items) == [1, 2, 3, 4]
    assert page.total == 4


def test_search_is_case_insensitive_over_name_sku_and_brand(catalog):
    assert ids(query.filter_products(catalog, ProductFilters(search="DRILL"))) == [1, 4]
    assert ids(query.filter_products(catalog, ProductFilters(search="bits-1"))) == [4]
    assert ids(query.filter_products(catalog, ProductFilters(search="tramontina"))) == [2, 3]


def test_predicates_are_conjunctive(catalog):
    filters = ProductFilters(brand="Tramontina", category="Tools")
    assert ids(query.filter_products(catalog, filters)) == [2]

    filters = ProductFilters(brand="Tramontina", active=False)
    assert ids(query.filter_products(catalog, filters)) == [3]

    filters = ProductFilters(brand="Bosch", supplier_id=2, search="drill")
    assert ids(query.filter_products(catalog, filters)) == [4]


def test_has_photo_filter(catalog):
    assert ids(query.filter_products(catalog, ProductFilters(has_photo=True))) == [1]
    assert ids(query.filter_products(catalog, ProductFilters(has_photo=False))) == [2, 3, 4]


def test_cost_range_treats_unparseable_cost_as_zero(catalog):
    filters = ProductFilters(min_cost=Decimal("30"), max_cost=Decimal("100"))
    assert ids(query.filter_products(catalog, filters)) == [2, 3]

    assert ids(query.filter_products(catalog, ProductFilters(max_cost=Decimal("0")))) == [4]


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        ("12,50", Decimal("12.50")),
        (Decimal("3.10"), Decimal("3.10")),
        (7, Decimal("7")),
    ],
)
def test_parse_cost(raw, expected):
    assert query.parse_cost(raw) == expected


def test_sort_by_cost_desc(catalog):
    page = query.run_query(
        catalog,
        ProductFilters(),
        PageRequest(limit=10, sort_by=SortField.COST_ITEM, sort_order=SortOrder.DESC),
    )
    assert ids(page.items) == [1, 3, 2, 4]


def test_sort_puts_missing_values_first():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    products = [
        make_product(1, created_at=now + timedelta(days=1)),
        make_product(2, created_at=None),
        make_product(3, created_at=now),
    ]
    ordered = query.sort_products(products, SortField.CREATED_AT, SortOrder.ASC)
    assert ids(ordered) == [2, 3, 1]


def test_sort_is_stable_for_equal_keys():
    products = [make_product(pk, name="Same") for pk in range(1, 6)]
    ordered = query.sort_products(products, SortField.NAME, SortOrder.ASC)
    assert ids(ordered) == [1, 2, 3, 4, 5]


def test_pages_cover_the_filtered_set_exactly_once():
    products = [make_product(pk) for pk in range(1, 26)]
    seen = []
    for number in range(1, 4):
        page = query.run_query(products, ProductFilters(), PageRequest(page=number, limit=10))
        assert page.total == 25
        assert page.total_pages == 3
        seen.extend(ids(page.items))

    assert seen == list(range(1, 26))

    last = query.run_query(products, ProductFilters(), PageRequest(page=3, limit=10))
    assert len(last.items) == 5
    assert last.has_prev is True
    assert last.has_next is False


def test_page_past_the_end_is_empty():
    products = [make_product(pk) for pk in range(1, 4)]
    page = query.run_query(products, ProductFilters(), PageRequest(page=5, limit=10))
    assert page.items == []
    assert page.total == 3
    assert page.pagination_dict() == {
        "total": 3,
        "page": 5,
        "limit": 10,
        "total_pages": 1,
        "has_next": False,
        "has_prev": True,
    }


def test_empty_catalog_has_no_pages():
    page = query.run_query([], ProductFilters(), PageRequest())
    assert page.total_pages == 0
    assert page.has_next is False
    assert page.has_prev is False


def test_page_request_rejects_non_positive_values():
    with pytest.raises(ValueError):
        PageRequest(page=0)
    with pytest.raises(ValueError):
        PageRequest(limit=0)


def test_quick_search_matches_description_and_honours_limit(catalog):
    catalog[1].description = "Forged steel head"
    assert ids(query.quick_search(catalog, "steel")) == [2]
    assert ids(query.quick_search(catalog, "o", limit=2)) == [1, 2]
    assert query.quick_search(catalog, "   ") == []


def test_summarize(catalog):
    summary = query.summarize(catalog)
    assert summary == {
        "total": 4,
        "active": 3,
        "inactive": 1,
        "with_photos": 1,
        "without_photos": 3,
        "total_value": "365.50",
        "brands": 2,
        "categories": 3,
    }


def test_filter_options(catalog):
    options = query.filter_options(catalog)
    assert options == {
        "brands": ["Bosch", "Tramontina"],
        "categories": ["Accessories", "Garden", "Tools"],
        "suppliers": [1, 2],
    }
