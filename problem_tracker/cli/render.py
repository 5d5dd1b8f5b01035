"""Plain-text rendering of problems and errors."""

from typing import Iterable

from problem_tracker.errors import TrackerError, UsageError
from problem_tracker.models.problem import Problem

PLACEHOLDER = "-"
HELP_HINT = "Try 'problem-tracker help' for usage."


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _or_dash(value) -> str:
    return PLACEHOLDER if value is None else str(value)


def format_solve_times(times) -> str:
    if all(t is None for t in times):
        return "Not attempted"
    return ", ".join(PLACEHOLDER if t is None else f"{t}min" for t in times)


def format_summary(p: Problem) -> str:
    head = f"Problem #{p.id}: {p.description} ({p.difficulty or 'Unknown'})"
    if p.category:
        head += f" - Category: {p.category}"
    if p.pattern:
        head += f" - Pattern: {p.pattern}"

    lines = [head]
    if p.link:
        lines.append(f"  Link: {p.link}")
    lines.append(f"  Solve times: {format_solve_times(p.solve_times)}")
    if p.comments:
        lines.append(f"  Comments: {p.comments}")
    if p.needs_review:
        lines.append("  [REVIEW NEEDED]")
    return "\n".join(lines)


def format_detail(p: Problem) -> str:
    rows = [
        ("Difficulty", p.difficulty),
        ("Category", p.category),
        ("Pattern", p.pattern),
        ("Link", p.link),
    ]
    for n, minutes in enumerate(p.solve_times, start=1):
        rows.append((f"Attempt {n}", None if minutes is None else f"{minutes} min"))
    rows.append(("Comments", p.comments))
    rows.append(("Review", yes_no(p.needs_review)))

    width = max(len(label) for label, _ in rows) + 1
    lines = [f"Problem #{p.id}: {p.description}"]
    lines += [f"  {label + ':':<{width}} {_or_dash(value)}" for label, value in rows]
    return "\n".join(lines)


def format_list(problems: Iterable[Problem], title: str, empty_message: str) -> str:
    problems = list(problems)
    if not problems:
        return empty_message
    blocks = [f"{title} ({len(problems)})"]
    blocks += [format_summary(p) for p in problems]
    return "\n\n".join(blocks)


def format_error(err: TrackerError) -> str:
    msg = f"error: {err}"
    if isinstance(err, UsageError):
        msg += f" ({HELP_HINT})"
    return msg
