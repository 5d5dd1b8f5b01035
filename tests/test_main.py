"""End-to-end runs through main(argv) against a temp database."""

import io
import os
import sqlite3

import pytest

from problem_tracker import __version__
from problem_tracker.main import main


def _detail(out: str) -> dict:
    rows = [line.split(":", 1) for line in out.strip().splitlines()[1:]]
    return {k.strip(): v.strip() for k, v in rows}


def test_two_sum_scenario(run):
    code, out, _ = run("add", "Two Sum", "-C", "Arrays", "-p", "hashmap", "-d", "easy", "-t", "15")
    assert code == 0
    assert out.strip() == "Added problem with ID: 1"

    code, out, _ = run("list")
    assert code == 0
    assert out.startswith("All Problems (1)")
    assert "Problem #1: Two Sum (easy) - Category: Arrays - Pattern: hashmap" in out
    assert "Solve times: 15min, -, -" in out

    code, out, _ = run("update-time", "1", "2", "8")
    assert code == 0
    assert out.strip() == "Updated problem #1 with attempt 2 time: 8 minutes"

    code, out, _ = run("show", "1")
    assert code == 0
    fields = _detail(out)
    assert fields["Attempt 1"] == "15 min"
    assert fields["Attempt 2"] == "8 min"
    assert fields["Attempt 3"] == "-"

    code, out, _ = run("toggle-review", "1")
    assert out.strip() == "Problem #1 review flag set to: Yes"

    code, out, _ = run("review")
    assert code == 0
    assert out.startswith("Problems to Review (1)")
    assert "Problem #1: Two Sum" in out
    assert "[REVIEW NEEDED]" in out

    code, out, _ = run("delete", "1", "--force")
    assert code == 0
    assert out.strip() == "Deleted problem #1"

    code, out, err = run("show", "1")
    assert code == 1
    assert out == ""
    assert err.strip() == "error: Problem with ID 1 not found"


def test_empty_results_exit_zero(run):
    assert run("list")[:2] == (0, "No problems found\n")
    assert run("review")[:2] == (0, "No problems to review\n")
    assert run("by-category", "Graphs")[:2] == (0, "No problems found in category 'Graphs'\n")
    assert run("by-pattern", "dp")[:2] == (0, "No problems found with pattern 'dp'\n")
    assert run("by-difficulty", "hard")[:2] == (0, "No problems found with difficulty 'hard'\n")
    assert run("search", "tree")[:2] == (0, "No problems found matching 'tree'\n")


def test_filters_and_search(run):
    run("add", "Two Sum", "-C", "Arrays", "-d", "easy")
    run("add", "Word Ladder", "-C", "Graphs", "-p", "BFS", "-d", "hard", "-c", "tricky SEARCH space")

    code, out, _ = run("by-category", "Graphs")
    assert out.startswith("Problems in Category 'Graphs' (1)")
    assert "Word Ladder" in out and "Two Sum" not in out

    _, out, _ = run("by-pattern", "BFS")
    assert out.startswith("Problems with Pattern 'BFS' (1)")

    _, out, _ = run("by-difficulty", "easy")
    assert out.startswith("Problems with Difficulty 'easy' (1)")
    assert "Two Sum" in out

    _, out, _ = run("search", "search")
    assert out.startswith("Problems matching 'search' (1)")
    assert "Word Ladder" in out


def test_usage_error_does_not_touch_storage(run, db_path):
    code, out, err = run("update-time", "1", "x", "8")
    assert code == 2
    assert out == ""
    assert err.startswith("error: ")
    assert "problem-tracker help" in err
    assert len(err.strip().splitlines()) == 1
    assert not db_path.exists()


def test_attempt_out_of_range(run, db_path):
    run("add", "Two Sum", "-t", "15")
    code, _, err = run("update-time", "1", "4", "8")
    assert code == 1
    assert "attempt" in err
    _, out, _ = run("show", "1")
    assert "Attempt 1" in out and "15 min" in out


@pytest.mark.parametrize("args", [("update-time", "9", "1", "5"), ("toggle-review", "9"), ("delete", "9", "-f")])
def test_missing_id_is_not_found(run, args):
    code, _, err = run(*args)
    assert code == 1
    assert err.strip() == "error: Problem with ID 9 not found"


def test_delete_twice_fails(run):
    run("add", "Two Sum")
    assert run("delete", "1", "-f")[0] == 0
    assert run("delete", "1", "-f")[0] == 1


@pytest.mark.parametrize("answer, deleted", [("y\n", True), ("Y\n", True), ("n\n", False), ("\n", False), ("", False)])
def test_delete_confirmation(run, monkeypatch, answer, deleted):
    run("add", "Two Sum")
    monkeypatch.setattr("sys.stdin", io.StringIO(answer))
    code, out, _ = run("delete", "1")
    assert code == 0
    assert "Are you sure you want to delete problem #1? [y/N]" in out
    if deleted:
        assert "Deleted problem #1" in out
        assert run("show", "1")[0] == 1
    else:
        assert "Deletion cancelled" in out
        assert run("show", "1")[0] == 0


def test_toggle_review_twice(run):
    run("add", "Two Sum", "-r")
    assert run("toggle-review", "1")[1].strip() == "Problem #1 review flag set to: No"
    assert run("toggle-review", "1")[1].strip() == "Problem #1 review flag set to: Yes"


def test_help_needs_no_database(run, db_path):
    code, out, _ = run("help")
    assert code == 0
    assert "by-difficulty" in out
    code, out, _ = run("help", "add")
    assert "--category" in out
    assert not db_path.exists()


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_schema_mismatch_reports_storage_error(run, db_path):
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE problems (id INTEGER PRIMARY KEY, description TEXT)")
    conn.commit()
    conn.close()

    code, _, err = run("list")
    assert code == 1
    assert err.startswith("error: Table 'problems'")


TOO_BIG = str(2**63)


@pytest.mark.parametrize(
    "args",
    [
        ("show", TOO_BIG),
        ("toggle-review", TOO_BIG),
        ("delete", TOO_BIG, "-f"),
        ("update-time", TOO_BIG, "1", "5"),
        ("update-time", "1", "1", "99999999999999999999"),
        ("add", "Two Sum", "-t", "99999999999999999999"),
    ],
)
def test_oversized_integers_are_rejected_cleanly(run, db_path, args):
    code, out, err = run(*args)
    assert code == 1
    assert out == ""
    assert err.startswith("error: ")
    assert len(err.strip().splitlines()) == 1
    assert not db_path.exists()


def test_largest_id_is_just_not_found(run):
    code, _, err = run("show", str(2**63 - 1))
    assert code == 1
    assert err.strip() == f"error: Problem with ID {2**63 - 1} not found"


@pytest.mark.parametrize("flag", [None, "-C", "-c", "-l"])
def test_undecodable_text_is_rejected(run, db_path, flag):
    bad = os.fsdecode(b"caf\xff")
    args = ("add", bad) if flag is None else ("add", "Two Sum", flag, bad)
    code, out, err = run(*args)
    assert code == 1
    assert out == ""
    assert "not valid UTF-8" in err
    assert len(err.strip().splitlines()) == 1
    assert not db_path.exists()


def test_undecodable_search_keyword_is_rejected(run):
    code, _, err = run("search", os.fsdecode(b"\xfe"))
    assert code == 1
    assert "not valid UTF-8" in err


def test_empty_database_path_is_a_usage_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["-d", "", "add", "Two Sum"]) == 2
    out, err = capsys.readouterr()
    assert out == ""
    assert err.startswith("error: ")
    assert list(tmp_path.iterdir()) == []
