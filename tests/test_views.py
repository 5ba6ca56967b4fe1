"""Tests for the entity adapters."""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest

from jotter.models import Book, Note, ProjectSummary, TagSummary, Task
from jotter.repository import BookListOptions, NoteListOptions, TaskListOptions
from jotter.tui.data_list import DataListOptions
from jotter.tui.data_table import DataTableOptions
from jotter.tui.messages import ActionFailed, ReloadRequested
from jotter.tui.providers import FilterState
from jotter.tui.views.books import BookDataSource, BookRecord, new_book_list
from jotter.tui.views.notes import NoteDataSource, NoteRecord, new_note_list
from jotter.tui.views.projects import ProjectSummaryRecord, new_project_table
from jotter.tui.views.publications import PublicationDataSource, PublicationRecord, new_publication_list
from jotter.tui.views.tags import TagSummaryRecord, format_task_count, new_tag_table
from jotter.tui.views.tasks import (
    TaskDataSource,
    TaskRecord,
    format_description,
    format_priority,
    format_project,
    format_status,
    mark_done_action,
    new_task_table,
)

T0 = datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)
T1 = datetime(2024, 2, 3, 4, 5, tzinfo=timezone.utc)


class FakeTaskRepo:
    def __init__(self, tasks=()):
        self.tasks = list(tasks)
        self.list_calls: list[TaskListOptions] = []
        self.updated: list[Task] = []

    def list(self, opts: TaskListOptions) -> list[Task]:
        self.list_calls.append(opts)
        return list(self.tasks)

    def update(self, task: Task) -> None:
        self.updated.append(task)

    def get_tags(self) -> list[TagSummary]:
        return [TagSummary("docs", 1), TagSummary("work", 2)]

    def get_projects(self) -> list[ProjectSummary]:
        return [ProjectSummary("jotter", 2)]


class FakeNoteRepo:
    def __init__(self, notes=()):
        self.notes = list(notes)
        self.list_calls: list[NoteListOptions] = []
        self.calls: list[str] = []

    def list(self, opts: NoteListOptions) -> list[Note]:
        self.list_calls.append(opts)
        return list(self.notes)

    def get_leaflet_notes(self) -> list[Note]:
        self.calls.append("all")
        return [n for n in self.notes if n.is_publication]

    def list_published(self) -> list[Note]:
        self.calls.append("published")
        return [n for n in self.notes if n.is_publication and not n.is_draft]

    def list_drafts(self) -> list[Note]:
        self.calls.append("draft")
        return [n for n in self.notes if n.is_publication and n.is_draft]


class FakeBookRepo:
    def __init__(self, books=()):
        self.books = list(books)
        self.list_calls: list[BookListOptions] = []

    def list(self, opts: BookListOptions) -> list[Book]:
        self.list_calls.append(opts)
        return list(self.books)


@pytest.fixture
def task() -> Task:
    return Task(
        id=7,
        uuid="abc-123",
        description="Write the release notes",
        priority="high",
        project="jotter",
        tags=("docs",),
        entry=T0,
        modified=T1,
        annotations=("check links",),
    )


@pytest.fixture
def note() -> Note:
    return Note(id=2, title="Ideas", content="# Ideas\nGrow tomatoes", tags=("home", "garden"), created=T0, modified=T1)


@pytest.fixture
def publications() -> list[Note]:
    return [
        Note(id=1, title="Launch", content="We shipped", modified=T1, is_draft=False,
             published_at=T1, leaflet_rkey="RK-Launch", leaflet_cid="cid-9"),
        Note(id=2, title="Essay", content="Half done", modified=T0, leaflet_rkey="rk-essay"),
        Note(id=3, title="Private", content="Not linked", modified=T0),
    ]


class TestTaskRecord:
    """Tests for TaskRecord field access."""

    @pytest.mark.parametrize(
        "name,attr",
        [
            ("id", "id"), ("uuid", "uuid"), ("description", "description"), ("status", "status"),
            ("priority", "priority"), ("project", "project"), ("tags", "tags"), ("due", "due"),
            ("entry", "entry"), ("start", "start"), ("end", "end"), ("modified", "modified"),
            ("annotations", "annotations"),
        ],
    )
    def test_fields(self, task: Task, name: str, attr: str) -> None:
        assert TaskRecord(task).get_field(name) == getattr(task, attr)

    def test_unknown_field(self, task: Task) -> None:
        assert TaskRecord(task).get_field("color") == ""


class TestTaskDataSource:
    """Tests for TaskDataSource options."""

    def test_pending_by_default(self, task: Task) -> None:
        repo = FakeTaskRepo([task])
        records = TaskDataSource(repo).load(FilterState())

        assert records == [TaskRecord(task)]
        assert repo.list_calls == [
            TaskListOptions(status="pending", sort_by="modified", sort_order="DESC", limit=50)
        ]

    def test_show_all(self) -> None:
        repo = FakeTaskRepo()
        TaskDataSource(repo, show_all=True).load(FilterState())
        assert repo.list_calls[0].status == ""

    def test_explicit_filters(self) -> None:
        repo = FakeTaskRepo()
        TaskDataSource(repo, status="completed", priority="high", project="home").load(FilterState(limit=5))
        opts = repo.list_calls[0]
        assert (opts.status, opts.priority, opts.project, opts.limit) == ("completed", "high", "home", 5)

    def test_count(self, task: Task) -> None:
        assert TaskDataSource(FakeTaskRepo([task, task])).count(FilterState()) == 2


class TestTaskFormatters:
    """Tests for task column formatters."""

    def test_description(self) -> None:
        assert format_description("short") == "short"
        assert format_description("x" * 39) == "x" * 35 + "..."

    def test_status(self) -> None:
        assert format_status("completed") == "complete"

    def test_priority(self) -> None:
        assert format_priority("") == "-"
        assert format_priority("high") == "High"

    def test_project(self) -> None:
        assert format_project("") == "-"
        assert format_project("a-very-long-project") == "a-very-lon..."


class TestMarkDone:
    """Tests for the mark done action."""

    def test_completes_pending_task(self, task: Task) -> None:
        repo = FakeTaskRepo([task])
        result = mark_done_action(repo).handler(TaskRecord(task)).run()

        assert result == ReloadRequested("task 7 completed")
        [updated] = repo.updated
        assert updated.status == "completed"
        assert updated.end is not None
        assert updated.id == task.id

    def test_rejects_completed_task(self, task: Task) -> None:
        repo = FakeTaskRepo()
        done = TaskRecord(Task(id=1, uuid="u", description="d", status="completed"))
        result = mark_done_action(repo).handler(done).run()

        assert isinstance(result, ActionFailed)
        assert str(result.error) == "task already completed"
        assert repo.updated == []

    def test_bound_to_d(self) -> None:
        action = mark_done_action(FakeTaskRepo())
        assert (action.key, action.description) == ("d", "mark done")


class TestTaskTable:
    """Tests for new_task_table."""

    def test_titles(self) -> None:
        assert new_task_table(FakeTaskRepo()).opts.title == "Tasks (pending only)"
        assert new_task_table(FakeTaskRepo(), show_all=True).opts.title == "Tasks (showing all)"
        custom = new_task_table(FakeTaskRepo(), DataTableOptions(title="Mine"))
        assert custom.opts.title == "Mine"

    def test_columns_and_action(self) -> None:
        table = new_task_table(FakeTaskRepo())
        assert [f.title for f in table.opts.fields] == ["ID", "Description", "Status", "Priority", "Project"]
        assert [f.width for f in table.opts.fields] == [4, 40, 10, 10, 15]
        assert [a.key for a in table.opts.actions] == ["d"]
        assert table.opts.view_handler is not None

    def test_static_output(self, task: Task) -> None:
        out = io.StringIO()
        new_task_table(FakeTaskRepo([task]), DataTableOptions(output=out, static=True)).browse()
        lines = out.getvalue().splitlines()

        assert lines[0] == "Tasks (pending only)"
        assert lines[2].startswith("ID   Description")
        assert lines[4].split() == ["7", "Write", "the", "release", "notes", "pending", "High", "jotter"]

    def test_detail_view(self, task: Task) -> None:
        detail = new_task_table(FakeTaskRepo()).opts.view_handler(TaskRecord(task))
        assert "Task 7" in detail
        assert "Description: Write the release notes" in detail
        assert "check links" in detail


class TestNotes:
    """Tests for the note adapter."""

    @pytest.mark.parametrize(
        "name,attr",
        [
            ("id", "id"), ("title", "title"), ("content", "content"), ("tags", "tags"),
            ("archived", "archived"), ("created", "created"), ("modified", "modified"),
            ("file_path", "file_path"),
        ],
    )
    def test_fields(self, note: Note, name: str, attr: str) -> None:
        assert NoteRecord(note).get_field(name) == getattr(note, attr)

    def test_unknown_field(self, note: Note) -> None:
        assert NoteRecord(note).get_field("rkey") == ""

    def test_list_contract(self, note: Note) -> None:
        record = NoteRecord(note)
        assert record.get_title() == "Ideas"
        assert record.get_description() == "home, garden • Modified: 2024-02-03 04:05"
        assert record.get_filter_value() == "Ideas # Ideas\nGrow tomatoes home garden"

    def test_description_without_tags(self) -> None:
        record = NoteRecord(Note(id=1, title="t", modified=T0))
        assert record.get_description() == "Modified: 2024-01-02 03:04"

    def test_hides_archived_by_default(self) -> None:
        repo = FakeNoteRepo()
        NoteDataSource(repo, tags=("work",)).load(FilterState(limit=10))
        assert repo.list_calls == [NoteListOptions(archived=False, tags=("work",), content="", limit=10)]

    def test_show_archived(self) -> None:
        repo = FakeNoteRepo()
        NoteDataSource(repo, show_archived=True).load(FilterState())
        assert repo.list_calls[0].archived is None

    def test_search_uses_content_filter(self, note: Note) -> None:
        repo = FakeNoteRepo([note])
        records = NoteDataSource(repo).search("tomato", FilterState())
        assert records == [NoteRecord(note)]
        assert repo.list_calls[0].content == "tomato"

    def test_list_is_searchable(self) -> None:
        notes = new_note_list(FakeNoteRepo(), DataListOptions(title=""))
        assert notes.opts.title == "Notes"
        assert notes.opts.show_search and notes.opts.searchable

    def test_detail_drops_leading_heading(self, note: Note) -> None:
        detail = new_note_list(FakeNoteRepo()).opts.view_handler(NoteRecord(note))
        assert "Grow tomatoes" in detail
        assert detail.count("Ideas") == 1


class TestBooks:
    """Tests for the book adapter."""

    @pytest.fixture
    def book(self) -> Book:
        return Book(id=1, title="Dune", author="Frank Herbert", status="reading", progress=42,
                    pages=600, rating=4.5, notes="Spice", added=T0)

    @pytest.mark.parametrize(
        "name",
        ["id", "title", "author", "status", "progress", "pages", "rating", "notes", "added", "started", "finished"],
    )
    def test_fields(self, book: Book, name: str) -> None:
        assert BookRecord(book).get_field(name) == getattr(book, name)

    def test_unknown_field(self, book: Book) -> None:
        assert BookRecord(book).get_field("isbn") == ""

    def test_description(self, book: Book) -> None:
        assert BookRecord(book).get_description() == "by Frank Herbert • Reading • 600 pages • 42%"

    def test_description_hides_finished_progress(self) -> None:
        record = BookRecord(Book(id=1, title="t", status="finished", progress=100))
        assert record.get_description() == "Finished"

    def test_filter_value(self, book: Book) -> None:
        assert BookRecord(book).get_filter_value() == "Dune Frank Herbert Spice"

    def test_source_options(self) -> None:
        repo = FakeBookRepo()
        BookDataSource(repo, status="queued").search("dun", FilterState(limit=3))
        assert repo.list_calls == [BookListOptions(status="queued", search="dun", limit=3)]

    def test_detail(self, book: Book) -> None:
        detail = new_book_list(FakeBookRepo()).opts.view_handler(BookRecord(book))
        assert "Author: Frank Herbert" in detail
        assert "Rating: 4.5/5" in detail
        assert "Spice" in detail


class TestPublications:
    """Tests for the publication adapter."""

    def test_fields(self, publications: list[Note]) -> None:
        record = PublicationRecord(publications[0])
        assert record.get_field("id") == 1
        assert record.get_field("title") == "Launch"
        assert record.get_field("status") == "published"
        assert record.get_field("published_at") == T1
        assert record.get_field("modified") == T1
        assert record.get_field("leaflet_rkey") == "RK-Launch"
        assert record.get_field("leaflet_cid") == "cid-9"
        assert record.get_field("content") == ""

    def test_title_includes_status(self, publications: list[Note]) -> None:
        assert PublicationRecord(publications[0]).get_title() == "[1] Launch (published)"
        assert PublicationRecord(publications[1]).get_title() == "[2] Essay (draft)"

    def test_description(self, publications: list[Note]) -> None:
        assert PublicationRecord(publications[0]).get_description() == (
            "Published: 2024-02-03 04:05 • Modified: 2024-02-03 04:05 • rkey: RK-Launch"
        )
        assert PublicationRecord(publications[1]).get_description() == (
            "Modified: 2024-01-02 03:04 • rkey: rk-essay"
        )

    @pytest.mark.parametrize(
        "filter,call,ids",
        [("all", "all", [1, 2]), ("published", "published", [1]), ("draft", "draft", [2])],
    )
    def test_filter(self, publications: list[Note], filter: str, call: str, ids: list[int]) -> None:
        repo = FakeNoteRepo(publications)
        records = PublicationDataSource(repo, filter).load(FilterState())
        assert repo.calls == [call]
        assert [r.note.id for r in records] == ids

    @pytest.mark.parametrize("query,ids", [("SHIPPED", [1]), ("rk-", [1, 2]), ("essay", [2]), ("zzz", [])])
    def test_search_is_case_insensitive(self, publications: list[Note], query: str, ids: list[int]) -> None:
        source = PublicationDataSource(FakeNoteRepo(publications))
        assert [r.note.id for r in source.search(query, FilterState())] == ids

    def test_limit(self, publications: list[Note]) -> None:
        source = PublicationDataSource(FakeNoteRepo(publications))
        assert len(source.load(FilterState(limit=1))) == 1
        assert source.count(FilterState()) == 2

    def test_detail(self, publications: list[Note]) -> None:
        detail = new_publication_list(FakeNoteRepo()).opts.view_handler(PublicationRecord(publications[0]))
        assert "Status: published" in detail
        assert "RK-Launch" in detail
        assert "We shipped" in detail


class TestSummaries:
    """Tests for the tag and project tables."""

    @pytest.mark.parametrize("value,expected", [(0, "0 tasks"), (1, "1 task"), (5, "5 tasks"), ("n/a", "n/a")])
    def test_task_count(self, value, expected: str) -> None:
        assert format_task_count(value) == expected

    def test_tag_record(self) -> None:
        record = TagSummaryRecord(TagSummary("work", 2))
        assert (record.get_field("name"), record.get_field("task_count"), record.get_field("x")) == ("work", 2, "")

    def test_project_record(self) -> None:
        record = ProjectSummaryRecord(ProjectSummary("home", 1))
        assert (record.get_field("name"), record.get_field("task_count"), record.get_field("x")) == ("home", 1, "")

    def test_tag_table_static(self) -> None:
        out = io.StringIO()
        new_tag_table(FakeTaskRepo(), DataTableOptions(output=out, static=True)).browse()
        lines = out.getvalue().splitlines()
        assert lines[0] == "Tags"
        assert lines[2].split() == ["Tag", "Name", "Task", "Count"]
        assert lines[4].split() == ["docs", "1", "task"]
        assert lines[5].split() == ["work", "2", "tasks"]

    def test_project_table_static(self) -> None:
        out = io.StringIO()
        new_project_table(FakeTaskRepo(), DataTableOptions(output=out, static=True)).browse()
        lines = out.getvalue().splitlines()
        assert lines[0] == "Projects"
        assert lines[2].startswith("Project Name" + " " * 18)
        assert lines[4].split() == ["jotter", "2", "tasks"]
