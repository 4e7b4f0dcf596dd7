"""
Result sinks for ContrastPower.

Records are appended one at a time as grid cells finish, so results
produced before a failure stay on disk. Every write is serialised by a lock
and flushed immediately; rows never interleave.
"""

import threading
from pathlib import Path
from typing import List, Union

from .core.results import HEADER, SummaryRecord
from .errors import SinkWriteFailure


class MemorySink:
    """In-memory sink, mainly for tests and programmatic use."""

    def __init__(self):
        self.records: List[SummaryRecord] = []
        self._lock = threading.Lock()
        self.closed = False

    def write(self, record: SummaryRecord) -> None:
        with self._lock:
            if self.closed:
                raise SinkWriteFailure("write to a closed sink")
            self.records.append(record)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class CsvResultSink:
    """Append-only CSV writer.

    The header is written when the file is new or empty; existing content
    is kept so interrupted runs can be resumed into the same file.

    Args:
        path: Output file. Parent directories are created.
        header: Write the header row to new/empty files.

    Raises:
        SinkWriteFailure: If the file cannot be opened.
    """

    def __init__(self, path: Union[str, Path], header: bool = True):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.n_written = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            needs_header = header and (not self.path.exists() or self.path.stat().st_size == 0)
            self._handle = open(self.path, "a", encoding="utf-8", newline="")
            if needs_header:
                self._handle.write(",".join(HEADER) + "\n")
                self._handle.flush()
        except OSError as exc:
            raise SinkWriteFailure(f"cannot open {self.path}: {exc}") from exc

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def write(self, record: SummaryRecord) -> None:
        """Append one record and flush it to disk."""
        line = record.as_row() + "\n"
        with self._lock:
            if self._handle.closed:
                raise SinkWriteFailure(f"write to closed sink {self.path}")
            try:
                self._handle.write(line)
                self._handle.flush()
            except OSError as exc:
                raise SinkWriteFailure(f"cannot write to {self.path}: {exc}") from exc
            self.n_written += 1

    def flush(self) -> None:
        with self._lock:
            if self._handle.closed:
                return
            try:
                self._handle.flush()
            except OSError as exc:
                raise SinkWriteFailure(f"cannot flush {self.path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if not self._handle.closed:
                self._handle.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def read_summary(path: Union[str, Path]):
    """Load a summary CSV into a ``pandas.DataFrame``.

    Returns:
        DataFrame with the eleven summary columns.

    Raises:
        ValueError: If the file does not carry the summary header.
    """
    import pandas as pd

    df = pd.read_csv(path, dtype={"genId": str, "type": str, "slice_technique": str})
    missing = [column for column in HEADER if column not in df.columns]
    if missing:
        raise ValueError(f"{path} is not a summary file (missing columns: {', '.join(missing)})")
    return df[list(HEADER)]


__all__ = ["CsvResultSink", "MemorySink", "read_summary"]
