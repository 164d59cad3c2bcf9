#!/usr/bin/env python3
"""
Prism Instance Installer

Backs up your .minecraft folder, then installs a Prism instance archive
into it (mods, config, resourcepacks, shaderpacks, saves, versions,
jarmods, nativelibraries and options.txt).

Backups are written next to the game folder:
  Windows : %APPDATA%/.minecraft_backup_<yyyyMMdd_HHmmss>/
  Linux   : ~/.minecraft_backup_<yyyyMMdd_HHmmss>/
"""

import argparse
import sys

from loguru import logger

from prism_instance_installer import __version__
from prism_instance_installer.archive import ZipExtractor
from prism_instance_installer.installer import Installer
from prism_instance_installer.paths import AppPaths
from prism_instance_installer.sinks import ConsoleLogSink, FixedPathPicker


LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>[{level}]</level> {message}"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prism-instance-installer",
        description="Back up .minecraft and install a Prism instance archive into it.",
    )
    p.add_argument("instance_name", nargs="?", default=None,
                   help="Instance folder inside the archive (default: archive root)")
    p.add_argument("--archive", default=None,
                   help="Archive to install; skips the file dialog")
    p.add_argument("--app-data", default=None,
                   help="Directory holding .minecraft (default: platform app-data folder)")
    p.add_argument("--no-gui", action="store_true",
                   help="Print the run log instead of showing the log window")
    p.add_argument("--log-file", default=None, help="Also write a diagnostic log here")
    p.add_argument("--verbose", action="store_true", help="Debug diagnostics on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def configure_logging(verbose: bool = False, log_file: str | None = None):
    logger.remove()
    if verbose:
        logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG", colorize=True)
    if log_file:
        logger.add(log_file, level="DEBUG", encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    if args.no_gui:
        sink = ConsoleLogSink()
    else:
        from prism_instance_installer.ui import LogWindow
        sink = LogWindow()

    if args.archive:
        picker = FixedPathPicker(args.archive)
    else:
        from prism_instance_installer.ui import TkFilePicker
        picker = TkFilePicker()

    installer = Installer(
        picker=picker,
        extractor=ZipExtractor(),
        sink=sink,
        paths=AppPaths.from_environment(app_data=args.app_data),
        instance_name=args.instance_name,
    )
    logger.debug("Run {} starting", installer.ctx.timestamp)
    return installer.run()


if __name__ == "__main__":
    sys.exit(main())
