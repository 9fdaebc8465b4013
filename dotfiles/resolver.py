"""Package config path resolution."""

import logging
from pathlib import Path
from typing import List, Optional

# Tried in this order after the bare name, both for dotfiles in the base
# directory and for entries under .config
SUFFIXES = ("rc", ".d", ".conf", ".conf.d", ".toml", ".xml", ".json", ".yml", ".lua")

logger = logging.getLogger(__name__)


def candidate_paths(base_dir: Path, package_name: str) -> List[Path]:
    """
    List every path that may hold a package's config, in priority order.

    Order:
        <base>/.<name>, <base>/.<name><suffix>...,
        <base>/.config/<name>, <base>/.config/<name><suffix>...
    """
    base_dir = Path(base_dir)
    config_dir = base_dir / ".config"
    dot_name = f".{package_name}"

    candidates = [base_dir / dot_name]
    candidates.extend(base_dir / f"{dot_name}{suffix}" for suffix in SUFFIXES)
    candidates.append(config_dir / package_name)
    candidates.extend(config_dir / f"{package_name}{suffix}" for suffix in SUFFIXES)
    return candidates


def find_package_path(base_dir: Path, package_name: str) -> Optional[Path]:
    """
    Find the filesystem entry holding a package's config.

    Args:
        base_dir: Directory to search (home, or a stored package subtree)
        package_name: Name of the package

    Returns:
        The first existing candidate path, or None if nothing matches
    """
    for path in candidate_paths(base_dir, package_name):
        if path.exists():
            logger.debug(f"Resolved '{package_name}' to {path}")
            return path

    logger.debug(f"No config path found for '{package_name}' in {base_dir}")
    return None


def relative_package_path(base_dir: Path, package_name: str) -> Optional[Path]:
    """Resolve a package's config path relative to base_dir."""
    path = find_package_path(base_dir, package_name)
    if path is None:
        return None
    return path.relative_to(Path(base_dir))
