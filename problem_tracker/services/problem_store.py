# problem_tracker/services/problem_store.py
import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from problem_tracker.errors import InvalidAttempt, NotFound, StorageError, ValidationError
from problem_tracker.models.problem import ATTEMPT_SLOTS, SQLITE_INT_MAX, Problem
from problem_tracker.services.db import get_session, make_sessionmaker

logger = logging.getLogger(__name__)

FILTER_FIELDS = ("category", "pattern", "difficulty")
SEARCH_FIELDS = ("description", "comments", "category", "pattern")


class ProblemStore:
    """CRUD over the problems table. Every call runs in its own short session."""

    def __init__(self, engine: Engine):
        self._factory = make_sessionmaker(engine)

    @contextmanager
    def _session(self):
        with get_session(self._factory) as s:
            try:
                yield s
            except SQLAlchemyError as e:
                s.rollback()
                raise StorageError(f"Database error: {getattr(e, 'orig', None) or e}") from e

    def _get_or_raise(self, s, problem_id: int) -> Problem:
        if not 1 <= problem_id <= SQLITE_INT_MAX:
            raise NotFound(problem_id)
        row = s.get(Problem, problem_id)
        if row is None:
            raise NotFound(problem_id)
        return row

    def _all(self, stmt) -> List[Problem]:
        with self._session() as s:
            return list(s.execute(stmt.order_by(Problem.id)).scalars().all())

    # ---- create

    def insert(
        self,
        description: str,
        *,
        link: Optional[str] = None,
        category: Optional[str] = None,
        pattern: Optional[str] = None,
        difficulty: Optional[str] = None,
        solve_time_1: Optional[int] = None,
        solve_time_2: Optional[int] = None,
        solve_time_3: Optional[int] = None,
        comments: Optional[str] = None,
        needs_review: bool = False,
    ) -> int:
        if not description or not description.strip():
            raise ValidationError("Description must not be empty")
        for minutes in (solve_time_1, solve_time_2, solve_time_3):
            _check_minutes(minutes)

        p = Problem(
            description=description,
            link=link,
            category=category,
            pattern=pattern,
            difficulty=difficulty,
            solve_time_1=solve_time_1,
            solve_time_2=solve_time_2,
            solve_time_3=solve_time_3,
            comments=comments,
            needs_review=bool(needs_review),
        )
        with self._session() as s:
            s.add(p)
            s.commit()
            logger.debug("[DB] inserted problem id=%s", p.id)
            return p.id

    # ---- read

    def get(self, problem_id: int) -> Problem:
        with self._session() as s:
            return self._get_or_raise(s, problem_id)

    def list_all(self) -> List[Problem]:
        return self._all(select(Problem))

    def filter_by(self, field: str, value: str) -> List[Problem]:
        """Exact, case-sensitive match on category, pattern or difficulty."""
        if field not in FILTER_FIELDS:
            raise ValidationError(f"Cannot filter by '{field}' (expected one of: {', '.join(FILTER_FIELDS)})")
        return self._all(select(Problem).where(getattr(Problem, field) == value))

    def filter_needs_review(self) -> List[Problem]:
        return self._all(select(Problem).where(Problem.needs_review.is_(True)))

    def search(self, keyword: str) -> List[Problem]:
        """Case-insensitive substring match across description, comments, category and pattern.

        ``%`` and ``_`` in the keyword match themselves.
        """
        clauses = [getattr(Problem, f).icontains(keyword, autoescape=True) for f in SEARCH_FIELDS]
        return self._all(select(Problem).where(or_(*clauses)))

    # ---- update

    def update_solve_time(self, problem_id: int, attempt: int, minutes: int) -> Problem:
        if attempt not in ATTEMPT_SLOTS:
            raise InvalidAttempt(attempt)
        _check_minutes(minutes)
        with self._session() as s:
            row = self._get_or_raise(s, problem_id)
            setattr(row, Problem.solve_time_column(attempt), minutes)
            s.commit()
            logger.debug("[DB] problem id=%s attempt %s -> %s min", problem_id, attempt, minutes)
            return row

    def toggle_review(self, problem_id: int) -> bool:
        """Flip needs_review and return the new value."""
        with self._session() as s:
            row = self._get_or_raise(s, problem_id)
            row.needs_review = not row.needs_review
            s.commit()
            return row.needs_review

    # ---- delete

    def delete(self, problem_id: int) -> None:
        with self._session() as s:
            row = self._get_or_raise(s, problem_id)
            s.delete(row)
            s.commit()
            logger.debug("[DB] deleted problem id=%s", problem_id)


def _check_minutes(minutes: Optional[int]) -> None:
    if minutes is not None and not 0 <= minutes <= SQLITE_INT_MAX:
        raise ValidationError(f"Minutes must be an integer between 0 and {SQLITE_INT_MAX} (got {minutes})")
