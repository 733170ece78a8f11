"""Logging setup and the per-run JSON-lines event log."""

import json
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, TextIO

LOG_LEVEL_ENV = "CHECKSUM_BENCH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_run_log_path: Optional[str] = None
_run_log_file: Optional[TextIO] = None

logger = logging.getLogger("bench.run")


def configure_root_logging(level: Optional[int] = None) -> None:
    """Configure root logger once; level falls back to $CHECKSUM_BENCH_LOG_LEVEL, then INFO."""
    if level is None:
        resolved = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(h)


def set_run_log_path(path: Optional[str]) -> None:
    """Route run events to `path` (appending). None closes the current file."""
    global _run_log_path, _run_log_file
    if _run_log_file is not None:
        _run_log_file.close()
        _run_log_file = None
    _run_log_path = path
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        _run_log_file = open(path, "a", encoding="utf-8")


def clear_run_log_path() -> None:
    set_run_log_path(None)


@contextmanager
def run_log_to(path: Optional[str]) -> Iterator[Optional[str]]:
    """Scope the run log file to a block; no file when path is None."""
    set_run_log_path(path)
    try:
        yield path
    finally:
        clear_run_log_path()


def run_log(event: str, level: str = "info", run_id: Optional[str] = None, **fields: Any) -> None:
    """Emit one structured event: a JSON line in the run log and a record on bench.run."""
    payload = {"ts": datetime.now(tz=timezone.utc).isoformat(), "event": event, "level": level}
    if run_id is not None:
        payload["run_id"] = run_id
    payload.update(fields)
    if _run_log_file is not None:
        _run_log_file.write(json.dumps(payload, default=str) + "\n")
        _run_log_file.flush()
    log_fn = getattr(logger, level.lower(), logger.info)
    log_fn("%s %s", event, " ".join(f"{k}={v}" for k, v in fields.items()))


def run_log_path() -> Optional[str]:
    """Return current run log file path, if set."""
    return _run_log_path
