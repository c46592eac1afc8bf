from datetime import date, datetime, timezone
from typing import List, Optional, Set

from pydantic import Field

from firerepo.models import Record

BOOKS = 'books'


class Address(Record):
    city: str = ''
    country: str = ''


class Book(Record):
    book_id: str
    name: str = Field(alias='title')
    author: str
    published: Optional[datetime]
    pages: int
    hardcover: bool = False
    tags: List[str] = Field(default_factory=list)
    labels: Set[str] = Field(default_factory=set)
    publisher: Address = Field(default_factory=Address)

    def get_id(self) -> str:
        return self.book_id


class Dated(Record):
    doc_id: str
    born: date

    def get_id(self) -> str:
        return self.doc_id


def make_book(n: int, author: str = 'Douglas Adams', **overrides) -> Book:
    values = dict(
        book_id=f'id-{n:03d}',
        name=f'Galaxy, volume {n}',
        author=author,
        published=datetime(2020, 1, 1 + n % 28, tzinfo=timezone.utc),
        pages=100 + n,
    )
    values.update(overrides)
    return Book(**values)
