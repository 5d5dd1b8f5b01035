"""argparse surface for the tracker. Parse failures raise UsageError instead of exiting."""

import argparse
from typing import Optional

from problem_tracker import __version__
from problem_tracker.config import settings
from problem_tracker.errors import UsageError

PROG = "problem-tracker"


class TrackerArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # name -> parser for each subcommand, filled in by build_parser
        self.subcommand_parsers = {}

    def error(self, message):
        raise UsageError(f"{self.prog}: {message}")


def _add_id(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Problem ID")


def build_parser() -> TrackerArgumentParser:
    parser = TrackerArgumentParser(
        prog=PROG,
        description="Track algorithm practice problems in a local SQLite database.",
    )
    parser.add_argument(
        "-d",
        "--database",
        default=settings.DB_PATH,
        help=f"Path to the SQLite database file (default: {settings.DB_PATH})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="name", metavar="command", required=True)

    add = sub.add_parser("add", help="Add a new problem")
    add.add_argument("description", help="Problem description")
    add.add_argument("-l", "--link", help="Problem link")
    add.add_argument("-C", "--category", help="Problem category")
    add.add_argument("-p", "--pattern", help="Problem pattern")
    add.add_argument("-d", "--difficulty", help="Problem difficulty")
    add.add_argument("-t", "--time", help="Time to solve (first attempt) in minutes")
    add.add_argument("-c", "--comments", help="Comments about the problem")
    add.add_argument("-r", "--review", action="store_true", help="Mark the problem for review")

    _add_id(sub.add_parser("show", help="Show a specific problem by ID"))
    sub.add_parser("list", help="List all problems")
    sub.add_parser("review", help="List problems that need review")

    for field in ("category", "pattern", "difficulty"):
        p = sub.add_parser(f"by-{field}", help=f"List problems by {field}")
        p.add_argument("value", metavar=field, help=f"{field.capitalize()} to match exactly")

    search = sub.add_parser("search", help="Search problems by keyword")
    search.add_argument("keyword", help="Case-insensitive substring to look for")

    update = sub.add_parser("update-time", help="Update a problem's solve time")
    _add_id(update)
    update.add_argument("attempt", help="Attempt number (1, 2, or 3)")
    update.add_argument("minutes", help="Time to solve in minutes")

    _add_id(sub.add_parser("toggle-review", help="Toggle a problem's review flag"))

    delete = sub.add_parser("delete", help="Delete a problem")
    _add_id(delete)
    delete.add_argument("-f", "--force", action="store_true", help="Skip confirmation")

    help_ = sub.add_parser("help", help="Show help for the tool or a command")
    help_.add_argument("topic", nargs="?", metavar="command", help="Command to describe")

    parser.subcommand_parsers = dict(sub.choices)
    return parser


def format_help(parser: TrackerArgumentParser, topic: Optional[str] = None) -> str:
    if topic is None:
        return parser.format_help()
    try:
        return parser.subcommand_parsers[topic].format_help()
    except KeyError:
        raise UsageError(f"Unknown command '{topic}'") from None
