"""Configuration management for the dotfiles backup utility."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

SETTINGS_FILE_NAME = "dotfiles.yaml"
DEFAULT_REPO_NAME = ".dotfiles"
REPO_ENV_VAR = "DOTFILES_REPO"
LOG_DIR = Path(".local") / "state" / "dotfiles"


class AppConfig(BaseModel):
    """Main application configuration."""

    home: Path = Field(description="Home directory holding the live configuration")
    repo: Path = Field(description="Repository directory holding stored packages")
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path, relative paths are taken from ~/.local/state/dotfiles",
    )
    packages: List[str] = Field(
        default_factory=list,
        description="Packages to process when none are given on the command line",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: List[str]) -> List[str]:
        """Validate package names."""
        return [validate_package_name(name) for name in v]

    @property
    def settings_file(self) -> Path:
        """Location of the optional settings file inside the repo."""
        return self.repo / SETTINGS_FILE_NAME

    @property
    def log_file_path(self) -> Optional[Path]:
        """Get log_file as an absolute path, or None when file logging is off."""
        if not self.log_file:
            return None
        path = Path(self.log_file).expanduser()
        if not path.is_absolute():
            # Kept out of the repo root, which only holds packages
            path = self.home / LOG_DIR / path
        return path

    def store_path(self, package: str) -> Path:
        """Root of the stored subtree for a package."""
        return self.repo / package


def validate_package_name(name: str) -> str:
    """
    Check that a package name is a single path component.

    Names are otherwise opaque, but they are joined onto the repo and the
    base directories, so absolute paths, separators, "." and ".." would
    escape <repo>/<package>.
    """
    if not name or not name.strip():
        raise ValueError("Package name must not be empty")
    separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
    if name in (".", "..") or any(sep in name for sep in separators):
        raise ValueError(f"Package name must be a plain name, not a path: {name}")
    if Path(name).is_absolute():
        raise ValueError(f"Package name must not be an absolute path: {name}")
    return name


def get_home_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Read the home directory from the environment."""
    if environ is None:
        environ = os.environ

    home = environ.get("HOME")
    if not home:
        raise ValueError("$HOME should be set")
    return Path(home)


def get_repo_dir(
    home: Path,
    override: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Determine the repository directory.

    Args:
        home: Home directory
        override: Path given on the command line, takes precedence
        environ: Environment to read DOTFILES_REPO from (defaults to os.environ)

    Returns:
        Repository directory path
    """
    if environ is None:
        environ = os.environ

    if override:
        return Path(override).expanduser()
    if environ.get(REPO_ENV_VAR):
        return Path(environ[REPO_ENV_VAR]).expanduser()
    return home / DEFAULT_REPO_NAME


def load_config(home: Path, repo: Path) -> AppConfig:
    """Load configuration, reading the optional YAML settings file in the repo."""
    settings_file = repo / SETTINGS_FILE_NAME
    config_data = {}

    if settings_file.is_file():
        try:
            with open(settings_file, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML format in {settings_file}: {e}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Settings file must contain a mapping: {settings_file}")

    # Directories always come from the environment and command line
    config_data.pop("home", None)
    config_data.pop("repo", None)

    try:
        return AppConfig(home=home, repo=repo, **config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation error: {e}")
