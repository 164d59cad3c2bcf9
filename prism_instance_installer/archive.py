from __future__ import annotations

import zipfile
import zlib
from pathlib import Path

from loguru import logger


class ArchiveError(OSError):
    """The archive could not be read or unpacked."""


class ZipExtractor:
    """Unpacks a whole .zip archive into a directory."""

    def extract(self, archive_path: Path, dest_dir: Path, overwrite: bool = True) -> None:
        try:
            with zipfile.ZipFile(archive_path) as zf:
                members = zf.infolist()
                if not overwrite:
                    members = [m for m in members if not (Path(dest_dir) / m.filename).exists()]
                zf.extractall(dest_dir, members=members)
                logger.debug("Extracted {} entries from {}", len(members), archive_path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError,
                NotImplementedError, RuntimeError) as exc:
            # RuntimeError: encrypted entries without a password
            # NotImplementedError: unsupported compression method
            raise ArchiveError(f"{archive_path}: {exc}") from exc
