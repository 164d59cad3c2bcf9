"""Where things live: application-data root, temp root and derived paths."""

from __future__ import annotations

import os
import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path


TARGET_DIR_NAME = ".minecraft"
BACKUP_INFIX    = "_backup_"
EXTRACT_PREFIX  = "PrismExtract_"


def default_app_data_dir() -> Path:
    """Platform application-data root that holds .minecraft."""
    system = platform.system()
    if system == "Windows":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support"
    return Path.home()


@dataclass(frozen=True)
class AppPaths:
    app_data: Path
    temp_dir: Path

    @classmethod
    def from_environment(cls, app_data: str | Path | None = None,
                         temp_dir: str | Path | None = None) -> AppPaths:
        return cls(
            app_data=Path(app_data) if app_data else default_app_data_dir(),
            temp_dir=Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()),
        )


def target_root_for(paths: AppPaths) -> Path:
    return paths.app_data / TARGET_DIR_NAME


def backup_dir_for(target_root: Path, timestamp: str) -> Path:
    # sibling of the target: ".minecraft_backup_20240101_120000"
    return target_root.with_name(f"{target_root.name}{BACKUP_INFIX}{timestamp}")


def extract_dir_for(paths: AppPaths, timestamp: str) -> Path:
    return paths.temp_dir / f"{EXTRACT_PREFIX}{timestamp}"
