"""Command line interface for schema-annotate.

Usage:
    schema-annotate run [PATH ...] [--position {append,prepend}] [--border] [--dry-run]
    schema-annotate show <table>

Section toggles for both commands:
    --no-indexes --no-foreign-keys --no-constraints --no-references --no-triggers
"""

import argparse
import logging
import sys

from schema_annotate.cli.annotate import cmd_run, cmd_show
from schema_annotate.comment.options import POSITIONS


def _add_render_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--border", action="store_true", default=None,
        help="Frame the comment with dashed lines",
    )
    parser.add_argument(
        "--no-indexes", dest="indexes", action="store_false", default=None,
        help="Leave out indexes",
    )
    parser.add_argument(
        "--no-foreign-keys", dest="foreign_keys", action="store_false", default=None,
        help="Leave out foreign key constraints",
    )
    parser.add_argument(
        "--no-constraints", dest="constraints", action="store_false", default=None,
        help="Leave out check constraints (PostgreSQL)",
    )
    parser.add_argument(
        "--no-references", dest="references", action="store_false", default=None,
        help="Leave out foreign keys in other tables referencing this one (PostgreSQL)",
    )
    parser.add_argument(
        "--no-triggers", dest="triggers", action="store_false", default=None,
        help="Leave out triggers (PostgreSQL)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-annotate",
        description="Annotate model files with their database table schema",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to schema-annotate.yaml",
    )
    parser.add_argument(
        "--database-url", default=None,
        help="SQLAlchemy database URL (overrides config and environment)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log debug output",
    )
    sub = parser.add_subparsers(dest="command")

    # run
    run = sub.add_parser("run", help="Write schema comments into model files")
    run.add_argument(
        "paths", nargs="*",
        help="Model files or glob patterns (default: 'models' from config)",
    )
    run.add_argument(
        "--position", choices=POSITIONS, default=None,
        help="Put the comment at the end (append) or start (prepend) of each file",
    )
    run.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )
    _add_render_flags(run)

    # show
    show = sub.add_parser("show", help="Print the schema comment for a table")
    show.add_argument("table", help="Table name, optionally schema-qualified")
    _add_render_flags(show)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "run": cmd_run,
        "show": cmd_show,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
