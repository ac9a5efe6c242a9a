"""Save file path resolution."""

import os
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from ..errors import SaveNotFoundError
from .layout import SAVE_DIR_NAME, SAVE_FILE_NAME

if TYPE_CHECKING:
    from ..config import Config


def default_save_dir() -> Path:
    """%APPDATA%/EldenRing, falling back to ~/AppData/Roaming when APPDATA is unset."""
    appdata = os.environ.get("APPDATA")
    base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    return base / SAVE_DIR_NAME


def find_save_file(base_dir: Path) -> Path:
    """
    Probe each subdirectory of base_dir (one per account) for the save file.

    Raises:
        SaveNotFoundError: base_dir is missing or no subdirectory holds a save
    """
    try:
        entries = sorted(base_dir.iterdir())
    except OSError:
        raise SaveNotFoundError(f"{SAVE_DIR_NAME} folder not found at {base_dir}")

    for entry in entries:
        if not entry.is_dir():
            continue
        candidate = entry / SAVE_FILE_NAME
        if candidate.is_file():
            return candidate

    raise SaveNotFoundError(f"save file {SAVE_FILE_NAME} not found under {base_dir}")


def resolve_save_path(config: Optional["Config"] = None, base_dir: Optional[Path] = None) -> str:
    """
    Resolve the absolute save file path.

    A configured save_path wins but must exist. Otherwise the default
    per-user directory is probed.

    Args:
        config: Loaded config, or None during setup
        base_dir: Directory to probe instead of default_save_dir()

    Raises:
        SaveNotFoundError: Nothing usable was found
    """
    if config is not None and config.save_path:
        path = Path(config.save_path)
        if path.is_file():
            return str(path.resolve())
        raise SaveNotFoundError(f"save file not found at configured path: {config.save_path}")

    found = find_save_file(base_dir if base_dir is not None else default_save_dir())
    return str(found.resolve())
