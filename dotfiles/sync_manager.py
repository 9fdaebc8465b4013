"""Store and stage packages between the home directory and the repo."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, validate_package_name
from .mirror import copy_all, copy_into, count_files, delete_all
from .resolver import find_package_path, relative_package_path

STORE = "store"
STAGE = "stage"


class SyncResult:
    """Result of a store or stage operation for one package."""

    def __init__(
        self,
        package: str,
        action: str,
        success: bool,
        skipped: bool = False,
        source: Optional[Path] = None,
        destination: Optional[Path] = None,
        files_copied: int = 0,
        message: str = "",
        execution_time: float = 0.0,
    ):
        self.package = package
        self.action = action
        self.success = success
        self.skipped = skipped
        self.source = source
        self.destination = destination
        self.files_copied = files_copied
        self.message = message
        self.execution_time = execution_time

    def __repr__(self) -> str:
        return (
            f"SyncResult(package={self.package!r}, action={self.action!r}, "
            f"success={self.success}, skipped={self.skipped})"
        )


class SyncSummary:
    """Summary of all package operations in a run."""

    def __init__(self, results: Optional[List[SyncResult]] = None):
        self.results = results or []

    @property
    def total_packages(self) -> int:
        """Total number of packages processed."""
        return len(self.results)

    @property
    def copied_packages(self) -> int:
        """Number of packages that were copied."""
        return sum(1 for r in self.results if r.success and not r.skipped)

    @property
    def skipped_packages(self) -> int:
        """Number of packages skipped with a warning."""
        return sum(1 for r in self.results if r.skipped)

    @property
    def total_files(self) -> int:
        """Total number of files copied across all packages."""
        return sum(r.files_copied for r in self.results)

    def add_result(self, result: SyncResult) -> None:
        """Add a package result to the summary."""
        self.results.append(result)


class StoredPackage:
    """A package found in the repo, as reported by the list command."""

    def __init__(
        self,
        name: str,
        stored_path: Optional[Path],
        home_path: Optional[Path],
        file_count: int = 0,
    ):
        self.name = name
        self.stored_path = stored_path
        self.home_path = home_path
        self.file_count = file_count

    @property
    def is_live(self) -> bool:
        """Whether the package currently resolves in the home directory."""
        return self.home_path is not None


def is_within(path: Path, root: Path) -> bool:
    """Whether path is root itself or lies somewhere below it."""
    path = Path(path).resolve()
    root = Path(root).resolve()
    return path == root or root in path.parents


def report_skip(message: str) -> None:
    """Print a notice for a package that is skipped."""
    print(message, file=sys.stderr)


def format_sync_summary(action: str, summary: SyncSummary, dry_run: bool = False) -> str:
    """Format run results into a readable summary."""
    lines = []
    title = f"=== {action.capitalize()} Summary"
    if dry_run:
        title += " (dry run)"
    lines.append(title + " ===")

    lines.append(f"Packages processed: {summary.total_packages}")
    lines.append(f"Copied: {summary.copied_packages}")
    lines.append(f"Skipped: {summary.skipped_packages}")
    lines.append(f"Files copied: {summary.total_files}")

    for result in summary.results:
        if result.skipped:
            lines.append(f"  [SKIPPED] {result.package}: {result.message}")
        else:
            lines.append(
                f"  [OK] {result.package}: {result.files_copied} files "
                f"-> {result.destination} ({result.execution_time:.2f}s)"
            )

    return "\n".join(lines)


class SyncManager:
    """Main sync management class."""

    def __init__(self, config: AppConfig, dry_run: bool = False):
        self.config = config
        self.home = config.home
        self.repo = config.repo
        self.dry_run = dry_run
        self.logger = logging.getLogger(__name__)

    def _packages_or_defaults(self, packages: List[str]) -> List[str]:
        if packages:
            return [validate_package_name(pkg) for pkg in packages]
        if self.config.packages:
            self.logger.info(
                f"No packages given, using configured packages: {self.config.packages}"
            )
        return list(self.config.packages)

    def _holds_log_file(self, path: Path) -> bool:
        log_file = self.config.log_file_path
        return log_file is not None and is_within(log_file, path)

    def _skip(self, package: str, action: str, message: str) -> SyncResult:
        report_skip(message)
        self.logger.debug(message)
        return SyncResult(package, action, success=True, skipped=True, message=message)

    def store_package(self, package: str) -> SyncResult:
        """
        Back up one package from the home directory into the repo.

        The whole <repo>/<package> tree is deleted before the new copy is
        written, so nothing from a previous layout survives.

        Raises:
            OSError: A delete or copy failed
            CopyPreconditionError: The copy destination was not cleared
        """
        start_time = datetime.now()
        validate_package_name(package)

        pkg_path = find_package_path(self.home, package)
        if pkg_path is None:
            return self._skip(package, STORE, f"Could not find config files for {package}")

        store_path = self.config.store_path(package)
        if is_within(self.repo, pkg_path) or is_within(pkg_path, store_path):
            return self._skip(
                package, STORE, f"Refusing to store {package}: {pkg_path} overlaps the repository"
            )
        if self._holds_log_file(store_path):
            return self._skip(
                package, STORE, f"Refusing to store {package}: {store_path} holds the log file"
            )
        destination = store_path / pkg_path.relative_to(self.home)

        if self.dry_run:
            files_copied = count_files(pkg_path)
            print(f"Would replace {store_path} with {pkg_path} ({files_copied} files)")
        else:
            delete_all(store_path)
            files_copied = copy_all(pkg_path, destination)

        execution_time = (datetime.now() - start_time).total_seconds()
        self.logger.info(
            f"Stored '{package}': {files_copied} files from {pkg_path} in {execution_time:.2f}s"
        )

        return SyncResult(
            package,
            STORE,
            success=True,
            source=pkg_path,
            destination=destination,
            files_copied=files_copied,
            execution_time=execution_time,
        )

    def _home_relative_path(self, package: str) -> Optional[Path]:
        """
        Find where a stored package lives relative to home.

        The stored subtree is searched first; when it does not match any
        naming convention the live config in home is used instead.
        """
        store_path = self.config.store_path(package)
        relative = relative_package_path(store_path, package)
        if relative is None:
            relative = relative_package_path(self.home, package)
        return relative

    def stage_package(self, package: str) -> SyncResult:
        """
        Restore one package from the repo into the home directory.

        The live config is deleted first, then the stored subtree is merged
        into home, relying on it already mirroring the home layout.

        Raises:
            OSError: A delete or copy failed
            CopyPreconditionError: A copied entry already exists in home
        """
        start_time = datetime.now()
        validate_package_name(package)

        store_path = self.config.store_path(package)
        if not store_path.exists():
            return self._skip(package, STAGE, f"No stored config found for {package}, skipping")

        relative = self._home_relative_path(package)
        home_path = self.home / relative if relative is not None else None
        if home_path is not None and (
            is_within(self.home, home_path)
            or is_within(self.repo, home_path)
            or self._holds_log_file(home_path)
        ):
            return self._skip(
                package, STAGE, f"Refusing to stage {package}: {home_path} cannot be replaced"
            )

        if self.dry_run:
            files_copied = count_files(store_path)
            if home_path is not None:
                print(f"Would replace {home_path} with {store_path} ({files_copied} files)")
            else:
                print(f"Would copy {store_path} into {self.home} ({files_copied} files)")
        else:
            if home_path is not None:
                delete_all(home_path)
            files_copied = copy_into(store_path, self.home)

        execution_time = (datetime.now() - start_time).total_seconds()
        self.logger.info(
            f"Staged '{package}': {files_copied} files into {self.home} in {execution_time:.2f}s"
        )

        return SyncResult(
            package,
            STAGE,
            success=True,
            source=store_path,
            destination=home_path or self.home,
            files_copied=files_copied,
            execution_time=execution_time,
        )

    def _run_all(self, action: str, packages: List[str]) -> SyncSummary:
        summary = SyncSummary()
        packages = self._packages_or_defaults(packages)

        if not packages:
            report_skip("No packages specified, nothing to do")
            return summary

        operation = self.store_package if action == STORE else self.stage_package
        self.logger.info(f"Starting {action} for {len(packages)} packages")

        for package in packages:
            self.logger.debug(f"Processing package: {package}")
            summary.add_result(operation(package))

        self.logger.info(format_sync_summary(action, summary, self.dry_run))
        return summary

    def store_all(self, packages: List[str]) -> SyncSummary:
        """Store every package in order; skipped packages do not stop the run."""
        return self._run_all(STORE, packages)

    def stage_all(self, packages: List[str]) -> SyncSummary:
        """Stage every package in order; skipped packages do not stop the run."""
        return self._run_all(STAGE, packages)

    def list_stored_packages(self) -> List[StoredPackage]:
        """List the packages stored in the repo, with their live home paths."""
        if not self.repo.is_dir():
            return []

        packages = []
        for entry in sorted(self.repo.iterdir()):
            if not entry.is_dir() or entry.name.startswith("."):
                continue
            if self._holds_log_file(entry):
                continue
            stored = find_package_path(entry, entry.name)
            packages.append(
                StoredPackage(
                    name=entry.name,
                    stored_path=stored.relative_to(entry) if stored else None,
                    home_path=find_package_path(self.home, entry.name),
                    file_count=count_files(entry),
                )
            )
        return packages


def format_package_list(packages: List[StoredPackage]) -> str:
    """Format stored packages, one line each."""
    lines = []
    for pkg in packages:
        stored = str(pkg.stored_path) if pkg.stored_path else "?"
        status = "live" if pkg.is_live else "missing in home"
        lines.append(f"{pkg.name}: {stored} ({pkg.file_count} files, {status})")
    return "\n".join(lines)
