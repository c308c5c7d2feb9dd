import logging
import sys

from .commands.parser import build_parser
from ..fuzzy.core.types import FuzzyError

log = logging.getLogger("fuzzyctl")


def _configure_logging(args) -> None:
    level = getattr(logging, args.log_level)
    if args.verbose:
        level = min(level, logging.DEBUG if args.verbose > 1 else logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    try:
        args.func(args)
    except FuzzyError as e:
        log.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
