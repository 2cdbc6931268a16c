"""
Shared view helpers.
"""

from django.conf import settings
from django.core.paginator import Paginator
from django.utils.http import urlencode


def wants_partial(request):
    """True for script/XHR requests that only need a fragment re-rendered"""
    return (
        request.GET.get('format') == 'js'
        or request.headers.get('x-requested-with') == 'XMLHttpRequest'
    )


class SearchableListViewMixin:
    """
    Mixin for views that show a searchable, sortable, paginated list.

    Subclasses should define (or override the getters for):
    - search_param: GET parameter holding the search text
    - sort_param: GET parameter holding the selected sort mode
    - get_sort_modes(): ordered dict of sort mode label -> ordering

    Usage example:
        class MyListView(SearchableListViewMixin, DetailView):
            sort_param = 'sort_by'

            def get_sort_modes(self):
                return Thing.objects.SORT_MODES
    """

    search_param = 'query'
    sort_param = 'sort'
    paginate_by = None

    def get_sort_modes(self):
        return {}

    def get_search_query(self):
        return self.request.GET.get(self.search_param, '').strip()

    def get_current_sort_mode(self):
        """Requested sort mode, falling back to the first one"""
        sort_modes = self.get_sort_modes()
        requested = self.request.GET.get(self.sort_param)
        if requested in sort_modes:
            return requested
        return next(iter(sort_modes), None)

    def get_sort_mode_links(self):
        """One (label, url) pair per sort mode, keeping the search query"""
        search_query = self.get_search_query()
        links = []
        for mode in self.get_sort_modes():
            params = {self.sort_param: mode}
            if search_query:
                params[self.search_param] = search_query
            links.append((mode, f"{self.request.path}?{urlencode(params)}"))
        return links

    def get_paginate_by(self):
        return self.paginate_by or settings.ASSIGNMENTS_PER_PAGE

    def paginate(self, queryset, page_param='page'):
        """Return the requested page; out-of-range pages clamp to the last one"""
        paginator = Paginator(queryset, self.get_paginate_by())
        return paginator.get_page(self.request.GET.get(page_param))
