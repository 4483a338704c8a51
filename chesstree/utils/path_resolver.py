"""Path resolution for bundled resources and writable data files.

Bundled resources (config.json) are read from the package tree. Writable
data files (log files) never go next to the package: once installed it sits
in site-packages, which is shared by every user of the environment. They go
to a configured directory, or else to the per-user data directory.
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union


APP_NAME = "chesstree"

# Overrides the platform user data directory, e.g. for tests or containers
DATA_DIR_ENV = "CHESSTREE_DATA_DIR"


def get_app_root() -> Path:
    """Get the directory containing the chesstree package.

    Returns:
        The source checkout in development, site-packages once installed.
    """
    return Path(__file__).parent.parent.parent


def get_user_data_directory() -> Path:
    """Get the per-user data directory for chesstree.

    `CHESSTREE_DATA_DIR` wins when set. Otherwise this is %APPDATA% on
    Windows, ~/Library/Application Support on macOS and $XDG_DATA_HOME
    (default ~/.local/share) elsewhere, each with a chesstree subdirectory.
    """
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    if sys.platform == "win32":
        base = Path(os.getenv("APPDATA") or Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return base / APP_NAME


def resolve_data_file_path(filename: str, directory: Optional[Union[str, Path]] = None) -> Path:
    """Resolve where a writable data file goes.

    The directory is not created here; the caller creates it when it
    actually writes.

    Args:
        filename: Name of the data file (e.g., "chesstree.log").
        directory: Configured directory for the file. None selects the user
            data directory.

    Returns:
        Path where the file should be written.
    """
    if directory:
        return Path(directory).expanduser() / filename
    return get_user_data_directory() / filename


def get_app_resource_path(relative_path: str) -> Path:
    """Get the path to a bundled, read-only resource file.

    Args:
        relative_path: Relative path from app root (e.g., "chesstree/config/config.json").

    Returns:
        Path to the resource file.
    """
    return get_app_root() / relative_path
