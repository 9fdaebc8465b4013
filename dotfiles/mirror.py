"""Recursive delete and copy of whole config trees."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class CopyPreconditionError(RuntimeError):
    """
    Raised when a copy would overwrite an existing entry or its source is gone.

    Not an OSError: it halts the whole run instead of skipping the current
    package.
    """


def delete_all(path: Path) -> None:
    """
    Remove a file or a whole directory tree.

    A missing path is a no-op. Removal errors propagate as OSError.
    """
    path = Path(path)

    if path.is_dir() and not path.is_symlink():
        logger.debug(f"Deleting directory {path}")
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        logger.debug(f"Deleting file {path}")
        path.unlink()


def copy_all(src: Path, dest: Path) -> int:
    """
    Copy a file or directory tree to a destination that must not exist yet.

    Args:
        src: Existing file or directory
        dest: Target path, created along with any missing parents

    Returns:
        Number of files copied

    Raises:
        CopyPreconditionError: dest already exists or src does not exist
    """
    src = Path(src)
    dest = Path(dest)

    if dest.exists() or dest.is_symlink():
        raise CopyPreconditionError(f"Should remove destination before copy: {dest}")
    if not src.exists():
        raise CopyPreconditionError(f"Source should exist: {src}")

    if src.is_dir():
        dest.mkdir(parents=True)
        files_copied = 0
        for entry in sorted(src.iterdir()):
            files_copied += copy_all(entry, dest / entry.name)
        return files_copied

    if src.is_file():
        dest.parent.mkdir(parents=True, exist_ok=True)
        print(f"Copying {src} to {dest}")
        shutil.copyfile(src, dest)
        return 1

    logger.warning(f"Skipping unsupported entry: {src}")
    return 0


def copy_into(src_dir: Path, dest_dir: Path) -> int:
    """
    Merge the contents of src_dir into dest_dir.

    Directories present on both sides are descended into; every other entry
    goes through copy_all, so existing files at the destination still raise
    CopyPreconditionError.

    Returns:
        Number of files copied
    """
    src_dir = Path(src_dir)
    dest_dir = Path(dest_dir)

    if not src_dir.is_dir():
        raise CopyPreconditionError(f"Source should be a directory: {src_dir}")

    dest_dir.mkdir(parents=True, exist_ok=True)

    files_copied = 0
    for entry in sorted(src_dir.iterdir()):
        target = dest_dir / entry.name
        if entry.is_dir() and target.is_dir():
            files_copied += copy_into(entry, target)
        else:
            files_copied += copy_all(entry, target)
    return files_copied


def count_files(path: Path) -> int:
    """Count the regular files in a file or directory tree."""
    path = Path(path)

    if path.is_file():
        return 1
    if not path.is_dir():
        return 0
    return sum(1 for p in path.rglob("*") if p.is_file())
