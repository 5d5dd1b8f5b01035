"""Shared fixtures: every test gets its own SQLite file under tmp_path."""

from pathlib import Path

import pytest

from problem_tracker.main import main
from problem_tracker.services.db import init_db
from problem_tracker.services.problem_store import ProblemStore


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "problems.db"


@pytest.fixture
def engine(db_path):
    eng = init_db(db_path)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> ProblemStore:
    return ProblemStore(engine)


@pytest.fixture
def run(db_path, capsys):
    """Run the CLI against the test database; returns (exit_code, stdout, stderr)."""

    def _run(*args: str):
        code = main(["-d", str(db_path), *args])
        out, err = capsys.readouterr()
        return code, out, err

    return _run
