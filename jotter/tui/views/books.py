"""Book list."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from jotter.models import Book
from jotter.repository import BookListOptions
from jotter.tui.data_list import DataList, DataListOptions
from jotter.tui.providers import FilterState
from jotter.tui.views.detail import format_book


class BookRepository(Protocol):
    def list(self, opts: BookListOptions) -> list[Book]:
        ...


@dataclass(frozen=True)
class BookRecord:
    book: Book

    def get_field(self, name: str) -> Any:
        b = self.book
        fields = {
            "id": b.id,
            "title": b.title,
            "author": b.author,
            "status": b.status,
            "progress": b.progress,
            "pages": b.pages,
            "rating": b.rating,
            "notes": b.notes,
            "added": b.added,
            "started": b.started,
            "finished": b.finished,
        }
        return fields.get(name, "")

    def get_title(self) -> str:
        return self.book.title

    def get_description(self) -> str:
        b = self.book
        parts = []
        if b.author:
            parts.append(f"by {b.author}")
        if b.status:
            parts.append(b.status.title())
        if b.pages > 0:
            parts.append(f"{b.pages} pages")
        if 0 < b.progress < 100:
            parts.append(f"{b.progress}%")
        return " • ".join(parts)

    def get_filter_value(self) -> str:
        return " ".join([self.book.title, self.book.author, self.book.notes])


class BookDataSource:
    def __init__(self, repo: BookRepository, status: str = ""):
        self.repo = repo
        self.status = status

    def load(self, opts: FilterState) -> list[BookRecord]:
        repo_opts = BookListOptions(status=self.status, search=opts.search, limit=max(opts.limit, 0))
        return [BookRecord(book) for book in self.repo.list(repo_opts)]

    def count(self, opts: FilterState) -> int:
        return len(self.load(opts))

    def search(self, query: str, opts: FilterState) -> list[BookRecord]:
        return self.load(opts.with_search(query))


def new_book_list(repo: BookRepository, opts: DataListOptions | None = None, status: str = "") -> DataList:
    opts = opts or DataListOptions()
    opts = replace(opts, title=opts.title or "Books", show_search=True, searchable=True)
    if opts.view_handler is None:
        opts = replace(opts, view_handler=lambda record: format_book(record.book))

    return DataList(BookDataSource(repo, status), opts)
