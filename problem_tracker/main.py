# problem_tracker/main.py
import logging
import sys
from typing import Optional, Sequence

from problem_tracker.cli import render
from problem_tracker.cli.commands import dispatch, parse_command
from problem_tracker.cli.parser import build_parser, format_help
from problem_tracker.config import log_settings, settings
from problem_tracker.errors import TrackerError
from problem_tracker.services.db import init_db
from problem_tracker.services.problem_store import ProblemStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one command. Returns the process exit code."""
    configure_logging()
    log_settings()
    parser = build_parser()
    try:
        invocation = parse_command(parser, argv)
        cmd = invocation.command
        if cmd.name == "help":
            print(format_help(parser, cmd.topic))
            return 0

        engine = init_db(invocation.database)
        try:
            return dispatch(cmd, ProblemStore(engine))
        finally:
            engine.dispose()
    except TrackerError as e:
        logger.debug("[CLI] %s failed", type(e).__name__, exc_info=True)
        print(render.format_error(e), file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
