"""
jotter command line.

Usage:
    jotter init                          Create the data file
    jotter task list [--all] [--static]  Browse tasks
    jotter task add DESCRIPTION          Add a task
    jotter task done ID                  Complete a task
    jotter task tags | projects          Browse tag / project summaries
    jotter note list [--archived]        Browse notes
    jotter note add TITLE                Add a note
    jotter note archive ID               Archive a note
    jotter book list [--status S]        Browse the reading list
    jotter book add TITLE                Add a book
    jotter pub list [--filter F]         Browse publications
    jotter pub link NOTE_ID RKEY         Link a note to a publication record

List commands open the interactive browser; pass --static to print once.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from jotter import logging_setup
from jotter import store as store_mod
from jotter.config import Config, load_config
from jotter.models import BOOK_STATUSES
from jotter.repository import FileBookRepository, FileNoteRepository, FileTaskRepository, RepositoryError
from jotter.store import StoreError
from jotter.tui.data_list import DataListOptions
from jotter.tui.data_table import DataTableOptions
from jotter.tui.providers import FilterState
from jotter.tui.views.books import new_book_list
from jotter.tui.views.notes import new_note_list
from jotter.tui.views.projects import new_project_table
from jotter.tui.views.publications import FILTER_ALL, FILTERS, new_publication_list
from jotter.tui.views.tags import new_tag_table
from jotter.tui.views.tasks import new_task_table

logger = logging.getLogger(__name__)


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _mutate(config: Config, op: Callable[..., tuple[bool, str]], *args, **kwargs) -> int:
    """Apply one store mutation and save it if it succeeded."""
    try:
        data = store_mod.read_store(config.data_file)
    except StoreError as e:
        return _error(str(e))

    success, msg = op(data, *args, **kwargs)
    if not success:
        return _error(msg)

    store_mod.save_store(config.data_file, data)
    logger.info(msg)
    print(msg)
    return 0


def _browse(browser, config: Config) -> int:
    try:
        browser.browse_with_options(FilterState(limit=config.page_limit))
    except (StoreError, RepositoryError) as e:
        # Static display has already printed the error
        logger.error("browse failed: %s", e)
        return 1
    return 0


def cmd_init(args, config: Config) -> int:
    if config.data_file.exists():
        return _error(f"Data file already exists: {config.data_file}")
    store_mod.save_store(config.data_file, store_mod.init_store())
    print(f"Initialized {config.data_file}")
    return 0


def cmd_task_list(args, config: Config) -> int:
    table = new_task_table(
        FileTaskRepository(config.data_file),
        DataTableOptions(static=args.static),
        show_all=args.all,
        status=args.status or "",
        priority=args.priority or "",
        project=args.project or "",
    )
    return _browse(table, config)


def cmd_task_add(args, config: Config) -> int:
    return _mutate(
        config,
        store_mod.add_task,
        " ".join(args.description),
        priority=args.priority or "",
        project=args.project or "",
        tags=args.tag,
        due=args.due,
    )


def cmd_task_done(args, config: Config) -> int:
    return _mutate(config, store_mod.complete_task, args.id)


def cmd_task_tags(args, config: Config) -> int:
    table = new_tag_table(FileTaskRepository(config.data_file), DataTableOptions(static=args.static))
    return _browse(table, config)


def cmd_task_projects(args, config: Config) -> int:
    table = new_project_table(FileTaskRepository(config.data_file), DataTableOptions(static=args.static))
    return _browse(table, config)


def cmd_note_list(args, config: Config) -> int:
    notes = new_note_list(
        FileNoteRepository(config.data_file),
        DataListOptions(static=args.static),
        show_archived=args.archived,
        tags=tuple(args.tag or ()),
    )
    return _browse(notes, config)


def cmd_note_add(args, config: Config) -> int:
    return _mutate(config, store_mod.add_note, args.title, content=args.content, tags=args.tag)


def cmd_note_archive(args, config: Config) -> int:
    return _mutate(config, store_mod.archive_note, args.id)


def cmd_book_list(args, config: Config) -> int:
    books = new_book_list(
        FileBookRepository(config.data_file),
        DataListOptions(static=args.static),
        status=args.status or "",
    )
    return _browse(books, config)


def cmd_book_add(args, config: Config) -> int:
    return _mutate(config, store_mod.add_book, args.title, author=args.author, pages=args.pages)


def cmd_pub_list(args, config: Config) -> int:
    pubs = new_publication_list(
        FileNoteRepository(config.data_file),
        DataListOptions(static=args.static),
        filter=args.filter,
    )
    return _browse(pubs, config)


def cmd_pub_link(args, config: Config) -> int:
    return _mutate(
        config,
        store_mod.link_publication,
        args.note_id,
        args.rkey,
        cid=args.cid,
        draft=not args.published,
    )


def _add_static(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--static", action="store_true", help="Print once instead of browsing")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jotter",
        description="Tasks, notes, books and publications in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-file", type=Path, help="Path to the data file (default: $JOTTER_HOME/jotter.json)")
    parser.add_argument("--log-level", help="Log level for the log file (default: INFO)")
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("init", help="Create the data file")
    p.set_defaults(func=cmd_init)

    # task
    task = commands.add_parser("task", help="Tasks").add_subparsers(dest="task_command", required=True)

    p = task.add_parser("list", help="Browse tasks")
    p.add_argument("--all", action="store_true", help="Include completed tasks")
    p.add_argument("--status", help="Only tasks with this status")
    p.add_argument("--priority", help="Only tasks with this priority")
    p.add_argument("--project", help="Only tasks in this project")
    _add_static(p)
    p.set_defaults(func=cmd_task_list)

    p = task.add_parser("add", help="Add a task")
    p.add_argument("description", nargs="+")
    p.add_argument("--priority")
    p.add_argument("--project")
    p.add_argument("--tag", action="append", help="Tag (repeatable)")
    p.add_argument("--due", help="Due date (ISO 8601)")
    p.set_defaults(func=cmd_task_add)

    p = task.add_parser("done", help="Complete a task")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_task_done)

    p = task.add_parser("tags", help="Browse tags")
    _add_static(p)
    p.set_defaults(func=cmd_task_tags)

    p = task.add_parser("projects", help="Browse projects")
    _add_static(p)
    p.set_defaults(func=cmd_task_projects)

    # note
    note = commands.add_parser("note", help="Notes").add_subparsers(dest="note_command", required=True)

    p = note.add_parser("list", help="Browse notes")
    p.add_argument("--archived", action="store_true", help="Include archived notes")
    p.add_argument("--tag", action="append", help="Only notes with this tag (repeatable)")
    _add_static(p)
    p.set_defaults(func=cmd_note_list)

    p = note.add_parser("add", help="Add a note")
    p.add_argument("title")
    p.add_argument("--content", default="")
    p.add_argument("--tag", action="append")
    p.set_defaults(func=cmd_note_add)

    p = note.add_parser("archive", help="Archive a note")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_note_archive)

    # book
    book = commands.add_parser("book", help="Reading list").add_subparsers(dest="book_command", required=True)

    p = book.add_parser("list", help="Browse books")
    p.add_argument("--status", choices=BOOK_STATUSES)
    _add_static(p)
    p.set_defaults(func=cmd_book_list)

    p = book.add_parser("add", help="Add a book")
    p.add_argument("title")
    p.add_argument("--author", default="")
    p.add_argument("--pages", type=int, default=0)
    p.set_defaults(func=cmd_book_add)

    # pub
    pub = commands.add_parser("pub", help="Publications").add_subparsers(dest="pub_command", required=True)

    p = pub.add_parser("list", help="Browse publications")
    p.add_argument("--filter", choices=FILTERS, default=FILTER_ALL)
    _add_static(p)
    p.set_defaults(func=cmd_pub_list)

    p = pub.add_parser("link", help="Link a note to a publication record")
    p.add_argument("note_id", type=int)
    p.add_argument("rkey")
    p.add_argument("--cid")
    p.add_argument("--published", action="store_true", help="Mark as published rather than draft")
    p.set_defaults(func=cmd_pub_link)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(data_file=args.data_file, log_level=args.log_level)
    logging_setup.configure(config.log_level, config.log_file)
    logger.debug("running %s with data file %s", args.command, config.data_file)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
