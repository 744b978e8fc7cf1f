"""Logging setup: rich console output plus an error log written only on failure."""

from __future__ import annotations

import logging
import logging.handlers
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

APP_NAME = "mucho"
_FILE_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"


class DeferredErrorLog(logging.handlers.MemoryHandler):
    """Buffer records for the whole run and write them to a file once an error is logged."""

    def __init__(self, app_name: str = APP_NAME, directory: str | Path | None = None) -> None:
        super().__init__(capacity=10_000, flushLevel=logging.ERROR, flushOnClose=False)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%SZ")
        self.path = Path(directory or tempfile.gettempdir()) / f"{app_name}-error-{stamp}.log"
        self._header = [
            f"# Error Log: {app_name}",
            f"Timestamp: {stamp}",
            f"Arguments: {' '.join(sys.argv[1:]) or '<NONE>'}",
            "----------",
        ]

    @property
    def written(self) -> bool:
        return self.target is not None

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.flushLevel or len(self.buffer) >= self.capacity

    def flush(self) -> None:
        self.acquire()
        try:
            if self.target is None:
                if not any(r.levelno >= self.flushLevel for r in self.buffer):
                    # no error yet, keep only the most recent records
                    del self.buffer[: len(self.buffer) - self.capacity + 1]
                    return
                self.path.write_text("\n".join(self._header) + "\n")
                target = logging.FileHandler(self.path, mode="a")
                target.setFormatter(logging.Formatter(_FILE_FORMAT))
                self.setTarget(target)
            super().flush()
        finally:
            self.release()

    def close(self) -> None:
        target = self.target
        if target is not None:
            self.flush()
        super().close()
        if target is not None:
            target.close()


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> DeferredErrorLog:
    root = logging.getLogger(APP_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)
    root.propagate = False

    stderr = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=verbose,
        markup=False,
    )
    stderr.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(stderr)

    error_log = DeferredErrorLog()
    error_log.setLevel(logging.DEBUG)
    root.addHandler(error_log)
    return error_log
