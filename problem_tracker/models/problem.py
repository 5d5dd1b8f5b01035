# problem_tracker/models/problem.py
from sqlalchemy import Boolean, Column, Integer, Text, false

from problem_tracker.services.db import Base

ATTEMPT_SLOTS = (1, 2, 3)

# largest value an SQLite INTEGER column can hold
SQLITE_INT_MAX = 2**63 - 1


class Problem(Base):
    __tablename__ = "problems"

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(Text, nullable=False)
    link = Column(Text, nullable=True)
    category = Column(Text, nullable=True)
    pattern = Column(Text, nullable=True)          # technique, e.g. "two pointers"
    difficulty = Column(Text, nullable=True)       # free-form; usually easy | medium | hard

    # minutes per timed attempt
    solve_time_1 = Column(Integer, nullable=True)
    solve_time_2 = Column(Integer, nullable=True)
    solve_time_3 = Column(Integer, nullable=True)

    comments = Column(Text, nullable=True)
    needs_review = Column(Boolean, nullable=False, default=False, server_default=false())

    @staticmethod
    def solve_time_column(attempt: int) -> str:
        return f"solve_time_{attempt}"

    @property
    def solve_times(self):
        return (self.solve_time_1, self.solve_time_2, self.solve_time_3)

    def __repr__(self) -> str:
        return f"<Problem id={self.id} description={self.description!r}>"
