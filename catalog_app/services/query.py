"""In-memory filtering, sorting and pagination over a product collection.

All functions here are pure: they read attributes from the given products
(ORM instances or any object exposing the same attribute names) and never
touch the database or the cache.
"""

from collections import Counter
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Sequence

from core.enums import SortField, SortOrder
from core.schemas import ListingPage, PageRequest, ProductFilters

ZERO = Decimal("0")


def parse_cost(value: Any) -> Decimal:
    """Numeric value of a decimal-as-string cost; missing or garbage is 0."""
    if value in (None, ""):
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO


def _contains(haystack: Any, needle: str) -> bool:
    return bool(haystack) and needle in str(haystack).lower()


def matches(product: Any, filters: ProductFilters) -> bool:
    if filters.search:
        term = filters.search.lower()
        if not (
            _contains(product.name, term)
            or _contains(product.sku, term)
            or _contains(product.brand, term)
        ):
            return False
    if filters.brand is not None and product.brand != filters.brand:
        return False
    if filters.category is not None and product.category != filters.category:
        return False
    if filters.supplier_id is not None and product.supplier_id != filters.supplier_id:
        return False
    if filters.active is not None and bool(product.active) != filters.active:
        return False
    if filters.has_photo is not None and bool(product.photo) != filters.has_photo:
        return False
    if filters.min_cost is not None and parse_cost(product.cost_item) < filters.min_cost:
        return False
    if filters.max_cost is not None and parse_cost(product.cost_item) > filters.max_cost:
        return False
    return True


def filter_products(products: Iterable[Any], filters: ProductFilters) -> List[Any]:
    return [product for product in products if matches(product, filters)]


def sort_products(products: Sequence[Any], sort_by: SortField, order: SortOrder) -> List[Any]:
    field_name = sort_by.value

    if sort_by is SortField.COST_ITEM:
        def sort_key(product):
            return parse_cost(product.cost_item)
    else:
        # None sorts before every real value.
        def sort_key(product):
            value = getattr(product, field_name)
            return (value is not None, value)

    return sorted(products, key=sort_key, reverse=order is SortOrder.DESC)


def paginate(products: Sequence[Any], page: PageRequest) -> ListingPage:
    start = page.offset
    return ListingPage(
        items=list(products[start:start + page.limit]),
        total=len(products),
        page=page.page,
        limit=page.limit,
    )


def run_query(products: Iterable[Any], filters: ProductFilters, page: PageRequest) -> ListingPage:
    matched = filter_products(products, filters)
    if page.sort_by is not None:
        matched = sort_products(matched, page.sort_by, page.sort_order)
    return paginate(matched, page)


def quick_search(products: Iterable[Any], query: str, limit: int = 20) -> List[Any]:
    term = (query or "").strip().lower()
    if not term:
        return []
    results = []
    for product in products:
        if (
            _contains(product.name, term)
            or _contains(product.sku, term)
            or _contains(product.brand, term)
            or _contains(product.description, term)
        ):
            results.append(product)
            if len(results) >= limit:
                break
    return results


def summarize(products: Iterable[Any]) -> Dict[str, Any]:
    counts = Counter()
    total_value = ZERO
    brands = set()
    categories = set()
    for product in products:
        counts["total"] += 1
        counts["active" if product.active else "inactive"] += 1
        counts["with_photos" if product.photo else "without_photos"] += 1
        total_value += parse_cost(product.cost_item)
        if product.brand:
            brands.add(product.brand)
        if product.category:
            categories.add(product.category)
    return {
        "total": counts["total"],
        "active": counts["active"],
        "inactive": counts["inactive"],
        "with_photos": counts["with_photos"],
        "without_photos": counts["without_photos"],
        "total_value": str(total_value),
        "brands": len(brands),
        "categories": len(categories),
    }


def filter_options(products: Iterable[Any]) -> Dict[str, List[Any]]:
    brands = set()
    categories = set()
    suppliers: List[int] = []
    for product in products:
        if product.brand:
            brands.add(product.brand)
        if product.category:
            categories.add(product.category)
        if product.supplier_id and product.supplier_id not in suppliers:
            suppliers.append(product.supplier_id)
    return {
        "brands": sorted(brands),
        "categories": sorted(categories),
        "suppliers": suppliers,
    }
