#!/usr/bin/env python3
"""
AMI Tagger CLI

Enabled regions → owned public AMIs → missing tag? → tag (or report in dry-run)
Regions are processed concurrently; supported strategies: serial, multithread, asyncio
"""

import sys
import logging
import argparse
from typing import List, Optional

from pydantic import ValidationError

from .core import (
    AmiTaggerError,
    ConfigurationError,
    RunSummary,
    TaggingConfig,
    get_logger,
)
from .core.factories import TaggingPipelineFactory
from .core.models import DEFAULT_MAX_WORKERS, DEFAULT_TAG_KEY, DEFAULT_TAG_VALUE, PROCESSORS
from .core.protocols import Ec2ClientFactoryProtocol


def build_parser(add_help: bool = True) -> argparse.ArgumentParser:
    """
    Build the argument parser for the tagging command.

    With ``add_help=False`` the parser can serve as a parent of the
    ``run`` subcommand in the unified CLI.
    """
    parser = argparse.ArgumentParser(
        description="Tag owned, publicly executable AMIs that lack a tag, in every enabled region",
        add_help=add_help,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which AMIs would be tagged without tagging them",
    )
    parser.add_argument(
        "--tag-key", default=DEFAULT_TAG_KEY, help=f"Tag key to look for and apply (default: {DEFAULT_TAG_KEY})"
    )
    parser.add_argument(
        "--tag-value", default=DEFAULT_TAG_VALUE, help=f"Tag value to apply (default: {DEFAULT_TAG_VALUE})"
    )
    parser.add_argument(
        "--processor",
        type=str,
        default="multithread",
        choices=list(PROCESSORS),
        help="Region fan-out strategy to use (default: multithread)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Maximum number of regions processed at once (default: {DEFAULT_MAX_WORKERS})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Cancel regions still running after this many seconds",
    )
    parser.add_argument("--profile", default=None, help="AWS profile to use")
    parser.add_argument(
        "--home-region", default=None, help="Region used to discover enabled regions"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the tagging command.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``.

    Returns:
        An `argparse.Namespace` object containing the parsed arguments.
    """
    return build_parser().parse_args(argv)


def build_config(args: argparse.Namespace) -> TaggingConfig:
    """Validate parsed arguments into a TaggingConfig."""
    try:
        return TaggingConfig(
            tag_key=args.tag_key,
            tag_value=args.tag_value,
            dry_run=args.dry_run,
            max_workers=args.max_workers,
            timeout=args.timeout,
            processor=args.processor,
            profile=args.profile,
            home_region=args.home_region,
            debug=args.debug,
        )
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e


def print_summary(summary: RunSummary, config: TaggingConfig) -> None:
    """
    Print the run report.

    One line per image acted on (or that would be acted on), then one status
    line per region, then the totals. Printed regardless of the log level.
    """
    tag = f"tag '{config.tag_key}' = '{config.tag_value}'"
    verb = "Would tag" if summary.dry_run else "Tagged"
    for result in summary.results:
        for image_id in result.image_ids:
            print(f"{result.region}: {verb} image {image_id} with {tag}")

    action = "would tag" if summary.dry_run else "tagged"
    for result in summary.results:
        if result.success:
            print(f"{result.region}: OK, {action} {len(result.image_ids)} image(s)")
        else:
            print(
                f"{result.region}: FAILED after {len(result.image_ids)} image(s): {result.error}"
            )

    total_action = "would be tagged" if summary.dry_run else "tagged"
    print(
        f"{summary.total_regions} region(s), {summary.affected_images} image(s) {total_action}, "
        f"{len(summary.failed_regions)} region(s) failed"
    )


def run_command(
    args: argparse.Namespace,
    client_factory: Optional[Ec2ClientFactoryProtocol] = None,
) -> None:
    """
    Run the tagging command for already parsed arguments.

    Builds the configuration and pipeline, runs every enabled region and
    exits with the run's status: 0 when all regions succeeded, 1 on setup
    failure or any failed region, 130 on interrupt.
    """
    logger = get_logger()
    try:
        config = build_config(args)

        if config.debug:
            logger.setLevel(logging.DEBUG)

        logger.info("Starting AMI tagger" + (" (dry run)" if config.dry_run else ""))

        coordinator = TaggingPipelineFactory.create_pipeline(
            config, client_factory=client_factory
        )
        summary = coordinator.run(config)

    except KeyboardInterrupt:
        logger.warning("Run interrupted by user.")
        sys.exit(130)
    except AmiTaggerError as e:
        logger.error(f"Run failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        sys.exit(1)

    print_summary(summary, config)
    print("Done!")
    sys.exit(summary.exit_code)


def main(
    argv: Optional[List[str]] = None,
    client_factory: Optional[Ec2ClientFactoryProtocol] = None,
) -> None:
    """Main entry point for the ``ami-tagger-run`` script."""
    run_command(parse_args(argv), client_factory=client_factory)


if __name__ == "__main__":
    main()
