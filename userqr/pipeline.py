"""
List view data pipeline: fetch, search/filter and pagination over the users
currently held in memory.

Filtering and paging never touch the database; ``load`` is the only call that
does I/O and the only one that can fail.
"""

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from utils import parse_integer
from .errors import FetchError

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


@dataclass
class Page:
    items: list
    number: int
    total_pages: int
    total: int

    @property
    def has_prev(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


@dataclass
class ListPipeline:
    all_records: list = field(default_factory=list)
    search_term: str = ''
    country_filter: str = ''
    current_page: int = 1
    loading: bool = False
    error: Optional[str] = None
    page_size: int = PAGE_SIZE

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> 'ListPipeline':
        """Rebuild view state from the query string (``q``, ``country``, ``page``)."""
        page = parse_integer(args.get('page', ''), default=1)
        if page < 1:
            page = 1
        return cls(
            search_term=args.get('q', ''),
            country_filter=args.get('country', '').strip(),
            current_page=page,
        )

    def query_args(self) -> dict:
        """Query string that reproduces the current state; defaults are omitted."""
        args = {}
        if self.search_term:
            args['q'] = self.search_term
        if self.country_filter:
            args['country'] = self.country_filter
        if self.current_page != 1:
            args['page'] = self.current_page
        return args

    def copy(self) -> 'ListPipeline':
        # shallow: the loaded records are shared, filter/page state is not
        return copy.copy(self)

    def load(self, store) -> None:
        self.loading = True
        try:
            records = store.fetch_all()
        except FetchError as e:
            logger.error('Loading users failed: %s', e)
            self.error = str(e) or 'An error occurred'
            self.all_records = []
        else:
            self.error = None
            self.all_records = list(records or [])
        finally:
            self.loading = False

    def apply_filters(self) -> List:
        term = self.search_term.lower()
        country = self.country_filter

        def matches(record):
            if term and not any(
                term in (getattr(record, attr) or '').lower()
                for attr in ('name', 'email', 'phone')
            ):
                return False
            return not country or record.country == country

        return [r for r in self.all_records if matches(r)]

    def total_pages(self, filtered) -> int:
        return math.ceil(len(filtered) / self.page_size)

    def paginate(self, filtered) -> Page:
        first = (self.current_page - 1) * self.page_size
        last = first + self.page_size
        return Page(
            items=list(filtered[first:last]),
            number=self.current_page,
            total_pages=self.total_pages(filtered),
            total=len(filtered),
        )

    # State transitions. Each returns self so views can derive link targets
    # from a copy: ``pipeline.copy().go_to_page(3).query_args()``.

    def set_search_term(self, term: str) -> 'ListPipeline':
        # does not reset current_page
        self.search_term = term or ''
        return self

    def set_country_filter(self, country: str) -> 'ListPipeline':
        self.country_filter = country or ''
        self.current_page = 1
        return self

    def clear_country_filter(self) -> 'ListPipeline':
        self.country_filter = ''
        return self

    def go_to_page(self, n: int) -> 'ListPipeline':
        self.current_page = n
        return self
