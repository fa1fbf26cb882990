"""
Main entry point for the replica shell.
"""

import argparse

from .cli import run_cli
from .config import LogLevel, configure_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="LWW graph - replicated directed graph shell"
    )

    parser.add_argument(
        "--replicas",
        type=str,
        default="a,b",
        help="Comma-separated replica ids to create (default: a,b)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=[level.value for level in LogLevel],
        help="Log level (default: WARNING)"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    replica_ids = [r.strip() for r in args.replicas.split(",") if r.strip()]
    run_cli(replica_ids or None, args.log_level)


if __name__ == "__main__":
    main()
