"""Background worker threads for the music player.

This module provides QThread-based workers for performing long-running
filesystem operations without blocking the UI thread.
"""

from typing import List, Optional

from PySide6.QtCore import QThread, Signal

from .logging_config import get_logger
from .scanner import FileScanner, ScanReport

logger = get_logger(__name__)


class ScanWorker(QThread):
    """Background worker thread that builds a queue from disk.

    Runs either a recursive folder scan (``root``) or a stat of an explicit
    file list (``paths``) and hands the resulting ``ScanReport`` back to the
    main thread through a signal. Only one of the two may be given.

    The scan can be abandoned by calling ``cancel()``: the report is then
    discarded instead of being emitted. The walk itself is not interrupted.

    Signals:
        scan_complete(object, str): Emitted with the ``ScanReport`` and the
            source kind (``"folder"`` or ``"files"``).
        scan_failed(str): Emitted with an error message if the scan raised.

    Args:
        scanner: Scanner to run.
        root: Folder to walk recursively.
        paths: Files to list.
        parent: Parent QObject (optional).

    Example:
        >>> worker = ScanWorker(FileScanner(), root="/music")
        >>> worker.scan_complete.connect(controller.apply_scan)
        >>> worker.start()
    """

    scan_complete = Signal(object, str)  # ScanReport, source kind
    scan_failed = Signal(str)

    def __init__(self, scanner: FileScanner, root: Optional[str] = None,
                 paths: Optional[List[str]] = None, parent=None):
        super().__init__(parent)
        if (root is None) == (paths is None):
            raise ValueError("give exactly one of root or paths")
        self.scanner = scanner
        self.root = root
        self.paths = list(paths) if paths is not None else None
        self._cancelled = False

    @property
    def source(self) -> str:
        return "folder" if self.root is not None else "files"

    def cancel(self):
        """Drop the result of this scan once it finishes."""
        self._cancelled = True

    def scan(self) -> ScanReport:
        """Run the scan on the calling thread."""
        if self.root is not None:
            return self.scanner.scan_report(self.root)
        return self.scanner.list_report(self.paths)

    def run(self):
        """Execute the scan in the background thread.

        Note:
            This method should not be called directly. Use start() instead.
        """
        try:
            report = self.scan()
        except Exception as e:
            logger.exception("Scan failed")
            if not self._cancelled:
                self.scan_failed.emit(str(e))
            return
        if not self._cancelled:
            self.scan_complete.emit(report, self.source)
