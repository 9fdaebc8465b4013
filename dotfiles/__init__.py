"""
dotfiles: Backup utility for configuration dotfiles.

This package mirrors per-package configuration files between the home
directory and a version-controlled repository directory.
"""

__version__ = "0.1.0"
