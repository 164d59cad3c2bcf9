"""
Backup-then-install sequence for a Prism instance archive.

The run is strictly sequential:
  select archive -> resolve it -> find .minecraft -> back up -> extract
  -> resolve source root -> install folders -> options.txt -> clean up

Each phase returns either its value or a Failure. The first Failure stops
the run; every buffered log line is handed to the sink exactly once.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import Callable, Protocol

from loguru import logger

from .paths import AppPaths, backup_dir_for, extract_dir_for, target_root_for


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FOLDER_SET = (
    "mods",
    "config",
    "resourcepacks",
    "shaderpacks",
    "saves",
    "versions",
    "jarmods",
    "nativelibraries",
)

ARCHIVE_PATTERN   = "*.zip"
PICKER_TITLE      = "Select instance archive"
OPTIONS_FILE      = "options.txt"
NESTED_ROOT_NAME  = "minecraft"
TIMESTAMP_FORMAT  = "%Y%m%d_%H%M%S"

EXIT_OK      = 0
EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# Results and log buffer
# ---------------------------------------------------------------------------

class ErrorKind(Enum):
    NoArchiveSelected      = "NoArchiveSelected"
    ArchiveNotAccessible   = "ArchiveNotAccessible"
    TargetNotFound         = "TargetNotFound"
    BackupDirCreateFailed  = "BackupDirCreateFailed"
    BackupCopyFailed       = "BackupCopyFailed"
    TempDirCreateFailed    = "TempDirCreateFailed"
    TempCleanupFailed      = "TempCleanupFailed"
    ExtractFailed          = "ExtractFailed"
    InstanceFolderNotFound = "InstanceFolderNotFound"
    DestClearFailed        = "DestClearFailed"
    DestCreateFailed       = "DestCreateFailed"
    InstallCopyFailed      = "InstallCopyFailed"
    OptionsCopyFailed      = "OptionsCopyFailed"


@dataclass(frozen=True)
class Failure:
    """Why a phase stopped the run."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class LogLevel(Enum):
    INFO  = "info"
    WARN  = "warn"
    ERROR = "error"


# loguru level names for mirroring buffered lines
_LOGURU_LEVELS = {
    LogLevel.INFO:  "INFO",
    LogLevel.WARN:  "WARNING",
    LogLevel.ERROR: "ERROR",
}


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    message: str


class LogBuffer:
    """Append-only run narrative, flushed once to a sink at the end."""

    def __init__(self):
        self._entries: list[LogEntry] = []
        self._flushed = False

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def append(self, level: LogLevel, message: str):
        if self._flushed:
            raise RuntimeError("log buffer already flushed")
        self._entries.append(LogEntry(level, message))
        logger.log(_LOGURU_LEVELS[level], message)

    def info(self, message: str):
        self.append(LogLevel.INFO, message)

    def warn(self, message: str):
        self.append(LogLevel.WARN, message)

    def error(self, message: str):
        self.append(LogLevel.ERROR, message)

    def flush_to(self, sink: LogSink):
        if self._flushed:
            raise RuntimeError("log buffer already flushed")
        self._flushed = True
        for entry in self._entries:
            sink.append(entry.level, entry.message)
        sink.flush_and_present()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class FilePicker(Protocol):
    def pick_file(self, pattern: str, title: str) -> str | None:
        ...


class ArchiveExtractor(Protocol):
    def extract(self, archive_path: Path, dest_dir: Path, overwrite: bool = True) -> None:
        ...


class LogSink(Protocol):
    def append(self, level: LogLevel, message: str) -> None:
        ...

    def flush_and_present(self) -> None:
        ...


# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------

@dataclass
class RunContext:
    timestamp: str
    instance_name: str | None = None
    archive_path: Path | None = None
    target_root: Path | None = None
    backup_dir: Path | None = None
    extract_dir: Path | None = None
    source_root: Path | None = None


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------

def _copy_entry(src: Path, dest: Path):
    """Copy a file or a whole directory tree from src to dest."""
    if src.is_dir():
        shutil.copytree(src, dest, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dest)


def _clear_directory(directory: Path) -> int:
    """Remove everything inside directory, keeping the directory itself."""
    n = 0
    for item in directory.iterdir():
        if item.is_dir() and not item.is_symlink():
            shutil.rmtree(item)
        else:
            item.unlink()
        n += 1
    return n


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------

def select_archive(picker: FilePicker) -> str | Failure:
    chosen = picker.pick_file(ARCHIVE_PATTERN, PICKER_TITLE)
    if not chosen:
        return Failure(ErrorKind.NoArchiveSelected, "No archive was selected.")
    return chosen


def resolve_archive(chosen: str) -> Path | Failure:
    try:
        resolved = Path(chosen).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        return Failure(ErrorKind.ArchiveNotAccessible, f"Cannot resolve archive {chosen}: {exc}")
    if not resolved.is_file():
        return Failure(ErrorKind.ArchiveNotAccessible, f"Archive is not a file: {resolved}")
    return resolved


def discover_target(paths: AppPaths) -> Path | Failure:
    target = target_root_for(paths)
    if not target.is_dir():
        return Failure(ErrorKind.TargetNotFound, f"Minecraft directory not found: {target}")
    return target


def backup_folders(target_root: Path, backup_dir: Path, log: LogBuffer) -> Failure | None:
    """
    Copy every FOLDER_SET entry present under target_root into backup_dir.

    Missing entries are warned about and skipped; a copy error on a present
    entry is fatal. Nothing already copied is removed on failure.
    """
    try:
        backup_dir.mkdir(exist_ok=False)
    except OSError as exc:
        return Failure(ErrorKind.BackupDirCreateFailed,
                       f"Cannot create backup directory {backup_dir}: {exc}")
    log.info(f"Backup directory: {backup_dir}")

    for name in FOLDER_SET:
        src = target_root / name
        if not src.exists():
            log.warn(f"Backup: '{name}' not found in {target_root}, skipping.")
            continue
        try:
            _copy_entry(src, backup_dir / name)
        except OSError as exc:
            return Failure(ErrorKind.BackupCopyFailed, f"Failed to back up '{name}': {exc}")
        log.info(f"Backed up '{name}'.")
    return None


def extract_archive(archive_path: Path, extract_dir: Path,
                    extractor: ArchiveExtractor, log: LogBuffer) -> Failure | None:
    if extract_dir.exists():
        logger.debug("Removing stale extraction directory {}", extract_dir)
        try:
            shutil.rmtree(extract_dir)
        except OSError as exc:
            return Failure(ErrorKind.TempCleanupFailed,
                           f"Cannot remove stale temp directory {extract_dir}: {exc}")
    try:
        extract_dir.mkdir(parents=True)
    except OSError as exc:
        return Failure(ErrorKind.TempDirCreateFailed,
                       f"Cannot create temp directory {extract_dir}: {exc}")

    try:
        extractor.extract(archive_path, extract_dir, overwrite=True)
    except OSError as exc:
        return Failure(ErrorKind.ExtractFailed, f"Cannot extract {archive_path.name}: {exc}")
    log.info(f"Extracted {archive_path.name} to {extract_dir}")
    return None


def _is_plain_name(name: str) -> bool:
    # PureWindowsPath splits on both separators and knows drive letters
    p = PureWindowsPath(name)
    return not p.anchor and len(p.parts) == 1 and name not in (".", "..")


def resolve_source_root(extract_dir: Path, instance_name: str | None) -> Path | Failure:
    """
    Find the folder whose children are installed.

    An archive often wraps its payload in a 'minecraft' folder; when one sits
    directly under the (instance) root it is used instead.
    """
    if instance_name and not _is_plain_name(instance_name):
        return Failure(ErrorKind.InstanceFolderNotFound,
                       f"Instance name must be a single folder name: {instance_name!r}")
    root = extract_dir / instance_name if instance_name else extract_dir
    if not root.is_dir():
        return Failure(ErrorKind.InstanceFolderNotFound, f"Instance folder not found: {root}")

    nested = root / NESTED_ROOT_NAME
    if nested.is_dir():
        return nested
    return root


def install_folders(source_root: Path, target_root: Path, log: LogBuffer) -> Failure | None:
    for name in FOLDER_SET:
        src = source_root / name
        if not src.exists():
            log.warn(f"Install: '{name}' not found in archive, skipping.")
            continue
        if not src.is_dir():
            log.warn(f"Install: '{name}' in archive is not a folder, skipping.")
            continue

        dest = target_root / name
        if dest.exists():
            try:
                removed = _clear_directory(dest)
            except OSError as exc:
                return Failure(ErrorKind.DestClearFailed, f"Cannot clear {dest}: {exc}")
            logger.debug("Cleared {} item(s) from {}", removed, dest)
        else:
            try:
                dest.mkdir(parents=True)
            except OSError as exc:
                return Failure(ErrorKind.DestCreateFailed, f"Cannot create {dest}: {exc}")

        try:
            for item in src.iterdir():
                _copy_entry(item, dest / item.name)
        except OSError as exc:
            return Failure(ErrorKind.InstallCopyFailed, f"Failed to install '{name}': {exc}")
        log.info(f"Installed '{name}'.")
    return None


def install_options(source_root: Path, target_root: Path, log: LogBuffer) -> Failure | None:
    src = source_root / OPTIONS_FILE
    if not src.is_file():
        log.warn(f"{OPTIONS_FILE} not found in archive, skipping.")
        return None
    try:
        shutil.copy2(src, target_root / OPTIONS_FILE)
    except OSError as exc:
        return Failure(ErrorKind.OptionsCopyFailed, f"Failed to copy {OPTIONS_FILE}: {exc}")
    log.info(f"Installed {OPTIONS_FILE}.")
    return None


def cleanup(extract_dir: Path) -> Failure | None:
    try:
        shutil.rmtree(extract_dir)
    except OSError as exc:
        return Failure(ErrorKind.TempCleanupFailed,
                       f"Install finished but temp directory {extract_dir} "
                       f"could not be removed: {exc}")
    return None


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class Installer:
    """Runs the whole backup-then-install sequence once."""

    def __init__(
        self,
        picker: FilePicker,
        extractor: ArchiveExtractor,
        sink: LogSink,
        paths: AppPaths,
        instance_name: str | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.picker    = picker
        self.extractor = extractor
        self.sink      = sink
        self.paths     = paths
        self.log       = LogBuffer()
        self.ctx       = RunContext(
            timestamp=now().strftime(TIMESTAMP_FORMAT),
            instance_name=instance_name or None,
        )
        self.failure: Failure | None = None

    def run(self) -> int:
        failure = self._run_phases()
        if failure is not None:
            return self._finish(failure)
        self.log.info("Installation completed successfully.")
        return self._finish(None)

    def _run_phases(self) -> Failure | None:
        ctx, log = self.ctx, self.log

        chosen = select_archive(self.picker)
        if isinstance(chosen, Failure):
            return chosen

        archive = resolve_archive(chosen)
        if isinstance(archive, Failure):
            return archive
        ctx.archive_path = archive
        log.info(f"Archive: {archive}")

        target = discover_target(self.paths)
        if isinstance(target, Failure):
            return target
        ctx.target_root = target
        log.info(f"Target: {target}")

        ctx.backup_dir = backup_dir_for(target, ctx.timestamp)
        failure = backup_folders(target, ctx.backup_dir, log)
        if failure:
            return failure

        ctx.extract_dir = extract_dir_for(self.paths, ctx.timestamp)
        failure = extract_archive(archive, ctx.extract_dir, self.extractor, log)
        if failure:
            return failure

        source = resolve_source_root(ctx.extract_dir, ctx.instance_name)
        if isinstance(source, Failure):
            return source
        ctx.source_root = source
        log.info(f"Source root: {source}")

        failure = install_folders(source, target, log)
        if failure:
            return failure

        failure = install_options(source, target, log)
        if failure:
            return failure

        return cleanup(ctx.extract_dir)

    def _finish(self, failure: Failure | None) -> int:
        self.failure = failure
        if failure is not None:
            self.log.error(str(failure))
        self.log.flush_to(self.sink)
        return EXIT_OK if failure is None else EXIT_FAILURE
