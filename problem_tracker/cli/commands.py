# problem_tracker/cli/commands.py
import logging
from typing import Annotated, Callable, Dict, Literal, Optional, Sequence, Union

from pydantic import AfterValidator, BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from problem_tracker.cli import render
from problem_tracker.cli.parser import TrackerArgumentParser
from problem_tracker.errors import UsageError, ValidationError
from problem_tracker.models.problem import SQLITE_INT_MAX
from problem_tracker.services.problem_store import ProblemStore

logger = logging.getLogger(__name__)


def _encodable(v: str) -> str:
    # undecodable argv bytes arrive as lone surrogates; SQLite only stores valid UTF-8
    try:
        v.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("text is not valid UTF-8") from None
    return v


Text = Annotated[str, AfterValidator(_encodable)]
ProblemId = Annotated[int, Field(ge=1, le=SQLITE_INT_MAX)]
Minutes = Annotated[int, Field(ge=0, le=SQLITE_INT_MAX)]


class AddCommand(BaseModel):
    name: Literal["add"]
    description: Text
    link: Optional[Text] = None
    category: Optional[Text] = None
    pattern: Optional[Text] = None
    difficulty: Optional[Text] = None
    time: Optional[Minutes] = None
    comments: Optional[Text] = None
    review: bool = False

    @field_validator("description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must not be empty")
        return v


class ShowCommand(BaseModel):
    name: Literal["show"]
    id: ProblemId


class ListCommand(BaseModel):
    name: Literal["list", "review"]


class FilterCommand(BaseModel):
    name: Literal["by-category", "by-pattern", "by-difficulty"]
    value: Text

    @property
    def field(self) -> str:
        return self.name[len("by-"):]


class SearchCommand(BaseModel):
    name: Literal["search"]
    keyword: Text


class UpdateTimeCommand(BaseModel):
    name: Literal["update-time"]
    id: ProblemId
    attempt: Annotated[int, Field(ge=1, le=3)]
    minutes: Minutes


class ToggleReviewCommand(BaseModel):
    name: Literal["toggle-review"]
    id: ProblemId


class DeleteCommand(BaseModel):
    name: Literal["delete"]
    id: ProblemId
    force: bool = False


class HelpCommand(BaseModel):
    name: Literal["help"]
    topic: Optional[str] = None


Command = Annotated[
    Union[
        AddCommand,
        ShowCommand,
        ListCommand,
        FilterCommand,
        SearchCommand,
        UpdateTimeCommand,
        ToggleReviewCommand,
        DeleteCommand,
        HelpCommand,
    ],
    Field(discriminator="name"),
]


class Invocation(BaseModel):
    database: Annotated[Text, Field(min_length=1)]
    command: Command


# input could not be read as the right type at all -> usage; read fine but out of range -> validation
_RANGE_ERRORS = {"greater_than", "greater_than_equal", "less_than", "less_than_equal", "value_error"}


def parse_command(parser: TrackerArgumentParser, argv: Optional[Sequence[str]] = None) -> Invocation:
    ns = parser.parse_args(argv)
    raw = vars(ns)
    try:
        return Invocation.model_validate({"database": raw.pop("database"), "command": raw})
    except PydanticValidationError as e:
        err = e.errors()[0]
        field = err["loc"][-1] if err["loc"] else raw.get("name")
        msg = f"{raw.get('name')}: invalid {field} {err.get('input')!r}: {err['msg']}"
        if all(x["type"] in _RANGE_ERRORS for x in e.errors()):
            raise ValidationError(msg) from None
        raise UsageError(msg) from None


# ---- handlers: one storage call each, output to stdout

def _add(cmd: AddCommand, store: ProblemStore) -> int:
    new_id = store.insert(
        cmd.description,
        link=cmd.link,
        category=cmd.category,
        pattern=cmd.pattern,
        difficulty=cmd.difficulty,
        solve_time_1=cmd.time,
        comments=cmd.comments,
        needs_review=cmd.review,
    )
    print(f"Added problem with ID: {new_id}")
    return 0


def _show(cmd: ShowCommand, store: ProblemStore) -> int:
    print(render.format_detail(store.get(cmd.id)))
    return 0


def _list(cmd: ListCommand, store: ProblemStore) -> int:
    if cmd.name == "review":
        problems = store.filter_needs_review()
        print(render.format_list(problems, "Problems to Review", "No problems to review"))
    else:
        problems = store.list_all()
        print(render.format_list(problems, "All Problems", "No problems found"))
    return 0


_FILTER_TITLES = {
    "category": ("Problems in Category '{}'", "No problems found in category '{}'"),
    "pattern": ("Problems with Pattern '{}'", "No problems found with pattern '{}'"),
    "difficulty": ("Problems with Difficulty '{}'", "No problems found with difficulty '{}'"),
}


def _filter(cmd: FilterCommand, store: ProblemStore) -> int:
    header, empty = _FILTER_TITLES[cmd.field]
    problems = store.filter_by(cmd.field, cmd.value)
    print(render.format_list(problems, header.format(cmd.value), empty.format(cmd.value)))
    return 0


def _search(cmd: SearchCommand, store: ProblemStore) -> int:
    problems = store.search(cmd.keyword)
    print(render.format_list(
        problems, f"Problems matching '{cmd.keyword}'", f"No problems found matching '{cmd.keyword}'"
    ))
    return 0


def _update_time(cmd: UpdateTimeCommand, store: ProblemStore) -> int:
    store.update_solve_time(cmd.id, cmd.attempt, cmd.minutes)
    print(f"Updated problem #{cmd.id} with attempt {cmd.attempt} time: {cmd.minutes} minutes")
    return 0


def _toggle_review(cmd: ToggleReviewCommand, store: ProblemStore) -> int:
    flagged = store.toggle_review(cmd.id)
    print(f"Problem #{cmd.id} review flag set to: {render.yes_no(flagged)}")
    return 0


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() == "y"


def _delete(cmd: DeleteCommand, store: ProblemStore) -> int:
    store.get(cmd.id)  # NotFound before asking
    if not cmd.force and not _confirm(f"Are you sure you want to delete problem #{cmd.id}? [y/N] "):
        print("Deletion cancelled")
        return 0
    store.delete(cmd.id)
    print(f"Deleted problem #{cmd.id}")
    return 0


HANDLERS: Dict[str, Callable[..., int]] = {
    "add": _add,
    "show": _show,
    "list": _list,
    "review": _list,
    "by-category": _filter,
    "by-pattern": _filter,
    "by-difficulty": _filter,
    "search": _search,
    "update-time": _update_time,
    "toggle-review": _toggle_review,
    "delete": _delete,
}


def dispatch(cmd: BaseModel, store: ProblemStore) -> int:
    logger.debug("[CLI] dispatching %s", cmd)
    return HANDLERS[cmd.name](cmd, store)
