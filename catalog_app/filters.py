import django_filters
from django import forms
from django.db.models import Q

from .models import Product


class IntegerFilter(django_filters.NumberFilter):
    field_class = forms.IntegerField


class ProductFilter(django_filters.FilterSet):
    """Listing predicates.

    The listing endpoint only uses the validated form data (filtering runs
    in memory against the cached catalog); the export endpoint applies the
    same predicates on the queryset.
    """

    search = django_filters.CharFilter(method="filter_search")
    brand = django_filters.CharFilter(field_name="brand")
    category = django_filters.CharFilter(field_name="category")
    supplier_id = IntegerFilter(field_name="supplier_id")
    active = django_filters.BooleanFilter(field_name="active")
    has_photo = django_filters.BooleanFilter(method="filter_has_photo")
    min_cost = django_filters.NumberFilter(field_name="cost_item", lookup_expr="gte")
    max_cost = django_filters.NumberFilter(field_name="cost_item", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["search", "brand", "category", "supplier_id", "active", "has_photo", "min_cost", "max_cost"]

    def filter_search(self, queryset, name, value):
        """Search in name, SKU and brand."""
        return queryset.filter(
            Q(name__icontains=value) |
            Q(sku__icontains=value) |
            Q(brand__icontains=value)
        )

    def filter_has_photo(self, queryset, name, value):
        with_photo = Q(photo__isnull=False) & ~Q(photo="")
        return queryset.filter(with_photo) if value else queryset.exclude(with_photo)
