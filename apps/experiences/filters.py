"""FilterSet for the public experience catalog."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Experience


class ExperienceFilterSet(django_filters.FilterSet):
    """Query parameters accepted by ``GET /experiences``.

    ``city`` matches experiences hosted by approved guides based in that city;
    an unknown city simply yields an empty page.
    """

    category = django_filters.ChoiceFilter(field_name="category", choices=Experience.Category.choices)
    city = django_filters.CharFilter(method="filter_city")
    minPrice = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    maxPrice = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    dateFrom = django_filters.IsoDateTimeFilter(field_name="date_time", lookup_expr="gte")
    dateTo = django_filters.IsoDateTimeFilter(field_name="date_time", lookup_expr="lte")

    class Meta:
        model = Experience
        fields = ["category", "city", "minPrice", "maxPrice", "dateFrom", "dateTo"]

    def filter_city(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.in_city(value.strip())
