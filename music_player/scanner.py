"""Folder scanning and file listing for the play queue.

Builds flat lists of ``Track`` objects either from an explicit list of files
(the multi-file picker) or by walking a folder recursively (the folder
picker). Filesystem errors never abort a whole operation: the failing entry
or subtree is skipped and recorded in the returned ``ScanReport``.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from .errors import ScanIOError
from .logging_config import get_logger
from .models import Track, is_audio_file

logger = get_logger(__name__)


@dataclass
class ScanReport:
    """Result of a scan: the tracks found plus every entry that was skipped."""
    tracks: List[Track] = field(default_factory=list)
    errors: List[ScanIOError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class FileScanner:
    """Turns filesystem paths into tracks.

    Directory cycles (through symlinks or bind mounts) are detected by
    remembering the ``(st_dev, st_ino)`` of every directory entered, so a
    walk always terminates. ``max_depth`` optionally bounds recursion as
    well; ``0`` means only the root's own files.

    Callers must not run two scans of the same root at the same time.

    Args:
        max_depth: Maximum directory depth below the root, or None for no limit.
    """

    def __init__(self, max_depth: Optional[int] = None):
        if max_depth is not None and max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth

    # --- explicit file lists -------------------------------------------------

    def list_files(self, paths: Iterable[str]) -> List[Track]:
        return self.list_report(paths).tracks

    def list_report(self, paths: Iterable[str]) -> ScanReport:
        """Stat each path and emit one Track per regular file.

        Paths that vanished or stopped being regular files since they were
        picked are skipped with a warning.
        """
        report = ScanReport()
        for raw in paths:
            path = os.path.abspath(os.fspath(raw))
            try:
                st = os.stat(path)
            except OSError as e:
                self._skip(report, path, e.strerror or str(e))
                continue
            if not stat.S_ISREG(st.st_mode):
                self._skip(report, path, "not a regular file")
                continue
            report.tracks.append(Track.from_stat(path, st))
        return report

    # --- recursive folder scan ----------------------------------------------

    def scan(self, root: str) -> List[Track]:
        return self.scan_report(root).tracks

    def scan_report(self, root: str) -> ScanReport:
        """Recursively collect allow-listed audio files below *root*.

        Entries are visited in the order the OS lists them, so the order of
        the result is not stable across platforms.
        """
        report = ScanReport()
        root = os.path.abspath(os.fspath(root))
        try:
            st = os.stat(root)
        except OSError as e:
            self._skip(report, root, e.strerror or str(e))
            return report
        if not stat.S_ISDIR(st.st_mode):
            self._skip(report, root, "not a directory")
            return report

        visited: Set[Tuple[int, int]] = set()
        self._walk(root, st, 0, visited, report)
        logger.info(
            "Scan of %s complete: %d track(s), %d skipped",
            root, len(report.tracks), len(report.errors),
        )
        return report

    def _walk(self, directory: str, dir_stat: os.stat_result, depth: int,
              visited: Set[Tuple[int, int]], report: ScanReport) -> None:
        key = (dir_stat.st_dev, dir_stat.st_ino)
        if key in visited:
            logger.debug("Skipping already visited directory %s", directory)
            return
        visited.add(key)

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            self._skip(report, directory, e.strerror or str(e))
            return

        for entry in entries:
            try:
                st = entry.stat()  # follows symlinks
            except OSError as e:
                self._skip(report, entry.path, e.strerror or str(e))
                continue

            if stat.S_ISDIR(st.st_mode):
                if self.max_depth is not None and depth >= self.max_depth:
                    logger.debug("Depth limit reached at %s", entry.path)
                    continue
                self._walk(entry.path, st, depth + 1, visited, report)
            elif stat.S_ISREG(st.st_mode) and is_audio_file(entry.name):
                report.tracks.append(Track.from_stat(entry.path, st))

    @staticmethod
    def _skip(report: ScanReport, path: str, reason: str) -> None:
        logger.warning("Skipping %s: %s", path, reason)
        report.errors.append(ScanIOError(path, reason))
