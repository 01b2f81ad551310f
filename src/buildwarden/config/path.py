"""Path utilities for finding the build directory."""

import os
from pathlib import Path


def get_workspace_directory_path(build_dir: Path) -> Path:
    """Generate the .buildwarden directory path for a given build directory.

    Args:
        build_dir: The included build directory (typically buildSrc)

    Returns:
        Path to the .buildwarden directory (e.g., /path/to/project/buildSrc/.buildwarden)
    """
    return build_dir / '.buildwarden'


def find_build_directory(start_path: Path) -> Path | None:
    """Find the closest directory, starting at start_path, that contains a .buildwarden subdirectory.

    Searches upward from the start path. The path is normalized without following symlinks
    so that a build directory reached through a symlink is reported under that symlink.

    Args:
        start_path: The file or directory to start searching from

    Returns:
        The build directory if found, None otherwise

    Examples:
        If start_path is /project/buildSrc/subproject/src and /project/buildSrc/.buildwarden
        exists, returns /project/buildSrc.
    """
    # os.path.normpath() removes . and .. without following symlinks, unlike Path.resolve()
    start_path = start_path if start_path.is_absolute() else Path.cwd() / start_path
    current = Path(os.path.normpath(str(start_path)))

    while True:
        if get_workspace_directory_path(current).is_dir():
            return current

        parent = current.parent
        if parent == current:
            # Reached root without finding a build directory
            return None
        current = parent
