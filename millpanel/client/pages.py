"""Client-side list state and status banners, mirroring how the panel pages behave"""
import math
import time

DEFAULT_PAGE_SIZE = 10
BANNER_TTL = 5


class ListPage:
    """
    Rows fetched once, then searched, sorted and paged locally.

    Mutations are applied optimistically after the server confirms them, so the
    page never refetches the whole list after a create, edit or delete.
    """

    def __init__(self, rows=None, search_fields=('name',), page_size=DEFAULT_PAGE_SIZE):
        self.rows = list(rows or [])
        self.search_fields = tuple(search_fields)
        self.page_size = page_size
        self.search = ''
        self.filters = {}
        self.sort_key = None
        self.sort_desc = False
        self.page = 1

    def load(self, rows):
        self.rows = list(rows)
        self.page = 1

    def set_search(self, term):
        self.search = (term or '').strip().lower()
        self.page = 1

    def set_filter(self, field, value):
        if value in (None, '', 'all'):
            self.filters.pop(field, None)
        else:
            self.filters[field] = value
        self.page = 1

    def set_sort(self, key, desc=False):
        self.sort_key = key
        self.sort_desc = desc

    def _matches(self, row):
        if self.search and not any(
            self.search in str(row.get(field) or '').lower() for field in self.search_fields
        ):
            return False
        return all(row.get(field) == value for field, value in self.filters.items())

    def visible_rows(self):
        rows = [row for row in self.rows if self._matches(row)]
        if self.sort_key:
            # Missing values sort last regardless of direction
            present = [row for row in rows if row.get(self.sort_key) is not None]
            missing = [row for row in rows if row.get(self.sort_key) is None]
            present.sort(key=lambda row: row[self.sort_key], reverse=self.sort_desc)
            rows = present + missing
        return rows

    @property
    def total_pages(self):
        return math.ceil(len(self.visible_rows()) / self.page_size)

    def go_to(self, page):
        self.page = max(1, min(page, self.total_pages or 1))

    def current_page(self):
        start = (self.page - 1) * self.page_size
        return self.visible_rows()[start:start + self.page_size]

    def add(self, row):
        self.rows.insert(0, row)

    def replace(self, row, key='id'):
        for index, existing in enumerate(self.rows):
            if existing.get(key) == row.get(key):
                self.rows[index] = row
                return True
        return False

    def remove(self, value, key='id'):
        before = len(self.rows)
        self.rows = [row for row in self.rows if row.get(key) != value]
        if self.page > 1 and self.page > (self.total_pages or 1):
            self.page = self.total_pages or 1
        return len(self.rows) < before


class Banner:
    """A success or error message that hides itself after `ttl` seconds"""

    def __init__(self, ttl=BANNER_TTL, clock=time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self.kind = None
        self.message = None
        self.shown_at = None

    def show(self, kind, message):
        self.kind = kind
        self.message = message
        self.shown_at = self.clock()

    def success(self, message):
        self.show('success', message)

    def error(self, message):
        self.show('error', message)

    def clear(self):
        self.kind = self.message = self.shown_at = None

    @property
    def is_visible(self):
        return self.shown_at is not None and self.clock() - self.shown_at < self.ttl
