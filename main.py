#!/usr/bin/env python3
"""
dotfiles: Backup utility for config dotfiles.

Main entry point for the store/stage command line.
"""

import argparse
import sys
from datetime import datetime
from typing import List, Optional

from dotfiles.config import AppConfig, get_home_dir, get_repo_dir, load_config
from dotfiles.logging_setup import setup_logging
from dotfiles.mirror import CopyPreconditionError
from dotfiles.sync_manager import SyncManager, format_package_list

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PRECONDITION = 3
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="dotfiles",
        description="A backup utility for config dotfiles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dotfiles store nvim zsh            # Back up ~/.config/nvim and ~/.zshrc
  dotfiles stage nvim                # Restore nvim config into home
  dotfiles -r ~/src/dots store git   # Use another repository
  dotfiles --dry-run stage zsh       # Show what would be restored
  dotfiles list                      # Show stored packages
        """,
    )

    parser.add_argument(
        "-r",
        "--repo",
        help="Repository path (default: $DOTFILES_REPO or ~/.dotfiles)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Resolve packages and report actions without touching any files",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug output",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    store_parser = subparsers.add_parser(
        "store", help="Back up packages from home into the repository"
    )
    store_parser.add_argument("pkgs", nargs="*", metavar="PKGS", help="Package names")

    stage_parser = subparsers.add_parser(
        "stage", help="Restore packages from the repository into home"
    )
    stage_parser.add_argument("pkgs", nargs="*", metavar="PKGS", help="Package names")

    subparsers.add_parser("list", help="List packages stored in the repository")

    return parser


def run_list(manager: SyncManager, config: AppConfig) -> int:
    """List stored packages."""
    packages = manager.list_stored_packages()
    if not packages:
        print(f"No packages stored in {config.repo}", file=sys.stderr)
        return EXIT_OK

    print(format_package_list(packages))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    start_time = datetime.now()
    args = build_parser().parse_args(argv)

    try:
        # Load configuration
        home = get_home_dir()
        repo = get_repo_dir(home, args.repo)
        config = load_config(home, repo)

        # Setup logging
        logger = setup_logging(config, verbose=args.verbose)
        logger.debug(f"Home: {config.home}, repository: {config.repo}")
        if args.dry_run:
            logger.info("Running in DRY RUN mode - no files will be changed")

        manager = SyncManager(config, dry_run=args.dry_run)

        if args.command == "store":
            manager.store_all(args.pkgs)
        elif args.command == "stage":
            manager.stage_all(args.pkgs)
        else:
            return run_list(manager, config)

        return EXIT_OK

    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    except CopyPreconditionError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        if "logger" in locals():
            logger.critical(f"Copy precondition violated, aborting run: {e}")
        return EXIT_PRECONDITION

    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if "logger" in locals():
            logger.error(f"I/O error, aborting run: {e}")
        return EXIT_ERROR

    except KeyboardInterrupt:
        print("\nINTERRUPTED: Sync interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    finally:
        if "logger" in locals():
            total_time = (datetime.now() - start_time).total_seconds()
            logger.debug(f"Run completed in {total_time:.2f} seconds")


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
