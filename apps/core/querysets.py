"""
QuerySet helpers shared by listing pages.
"""

from django.db import models
from django.db.models import Q


def apply_search_filter(queryset, search_fields, search_query):
    """OR an icontains lookup across search_fields; blank queries match all"""
    search_query = (search_query or '').strip()
    if not search_query or not search_fields:
        return queryset

    q_objects = Q()
    for field in search_fields:
        q_objects |= Q(**{f"{field}__icontains": search_query})
    return queryset.filter(q_objects)


class SortableQuerySet(models.QuerySet):
    """
    QuerySet with named sort modes and a free-text search.

    Subclasses define:
    - SORT_MODES: ordered dict of sort mode label -> list of ordering fields
    - SEARCH_FIELDS: fields matched by filter_by_search
    """

    SORT_MODES = {}
    SEARCH_FIELDS = []

    def filter_by_search(self, query):
        return apply_search_filter(self, self.SEARCH_FIELDS, query)

    def then_order_by(self, *fields):
        """Append fields to the current ordering instead of replacing it"""
        return self.order_by(*self.query.order_by, *fields)

    def order_by_sort_mode(self, sort_mode):
        return self.then_order_by(*self.SORT_MODES.get(sort_mode, []))
