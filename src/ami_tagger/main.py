"""Main module for the AMI tagger CLI."""

import sys
import argparse

from . import __version__
from .tag_images import build_parser, run_command


def main() -> None:
    """
    Entry point for the unified command-line interface (CLI) of the AMI tagger.

    This function sets up an `ArgumentParser` with a "run" command, which
    takes every option of the tagging command, and a "version" command.
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="ami-tagger",
        description="AMI Tagger - tag owned public AMIs missing a tag across all enabled regions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show which AMIs would get version=legacy-x86_64
  ami-tagger run --dry-run

  # Tag for real, at most 4 regions at a time, give up after 5 minutes
  ami-tagger run --max-workers 4 --timeout 300

  # Use a different tag
  ami-tagger run --tag-key generation --tag-value gen1 --profile prod

  # Show version
  ami-tagger version
        """,
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    subparsers.add_parser(
        "run",
        parents=[build_parser(add_help=False)],
        help="Tag (or report) AMIs missing the tag in every enabled region",
    )

    subparsers.add_parser("version", help="Show version information")

    args: argparse.Namespace = parser.parse_args()

    if args.command == "run":
        run_command(args)

    elif args.command == "version":
        print("AMI Tagger CLI")
        print(f"Version {__version__}")
        print("Tags owned public AMIs across all enabled AWS regions")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
