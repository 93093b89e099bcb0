"""CLI entry point: run `scripthost path/to/script` or `python -m scripthost path/to/script`."""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional


def _configure_logging() -> None:
    from .utils.config import DEFAULT_LOG_LEVEL, LOG_FORMAT, LOG_LEVEL_ENV_VAR

    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .compiler.driver import EvaluationDriver
    from .utils.config import PROGRAM_NAME, USAGE_MESSAGE

    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        add_help=False,
        usage="%(prog)s /path/to/script",
        description="Evaluate a script together with the scripts it imports.",
    )
    parser.add_argument("script", nargs="*", help="Path to the root script (under a 'scripts/' folder)")
    args, extra = parser.parse_known_args(argv)

    paths = list(args.script) + list(extra)
    if len(paths) != 1:
        print(USAGE_MESSAGE)
        return 1

    _configure_logging()
    return EvaluationDriver().run(Path(paths[0]))


if __name__ == "__main__":
    sys.exit(main())
