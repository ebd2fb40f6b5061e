"""Page/limit pagination used by the catalog and booking listings.

Unlike DRF's ``PageNumberPagination`` a page past the end yields an empty
slice instead of a 404, and the envelope carries ``totalCount``,
``totalPages`` and ``currentPage`` next to the resource key.
"""

from __future__ import annotations

import math
from collections import OrderedDict

from django.conf import settings  # type: ignore
from rest_framework.pagination import BasePagination  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import ValidationError


def _positive_int(raw, name: str, default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer.")
    if value < 1:
        raise ValidationError(f"'{name}' must be a positive integer.")
    return value


class PageLimitPagination(BasePagination):
    page_query_param = "page"
    limit_query_param = "limit"
    results_key = "results"

    def paginate_queryset(self, queryset, request, view=None):  # type: ignore
        self.page = _positive_int(request.query_params.get(self.page_query_param), self.page_query_param, 1)
        limit = _positive_int(
            request.query_params.get(self.limit_query_param),
            self.limit_query_param,
            settings.PAGINATION_DEFAULT_LIMIT,
        )
        self.limit = min(limit, settings.PAGINATION_MAX_LIMIT)
        self.total_count = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.total_count else 0

    def get_paginated_response(self, data):  # type: ignore
        return Response(
            OrderedDict(
                [
                    (self.results_key, data),
                    ("totalPages", self.total_pages),
                    ("currentPage", self.page),
                    ("totalCount", self.total_count),
                ]
            )
        )

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                self.results_key: schema,
                "totalPages": {"type": "integer"},
                "currentPage": {"type": "integer"},
                "totalCount": {"type": "integer"},
            },
        }


class ExperiencePagination(PageLimitPagination):
    results_key = "experiences"


class BookingPagination(PageLimitPagination):
    results_key = "bookings"
