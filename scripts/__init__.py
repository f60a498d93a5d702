"""Shared helpers for repository scripts."""

from pathlib import Path

from scripts._paths import get_dir_name

# The repository root acts as the anchor for all script paths so helpers can
# be reused from any working directory without recomputing the location.
REPO_ROOT: Path = get_dir_name().parent

__all__ = ["REPO_ROOT", "get_dir_name"]
