"""
recorder.py - Durable Crawl Output

Appends every processed URL to the output file and every per-item
failure to a timestamped error log. Both sinks are shared by all workers,
so each has its own lock and every write is flushed before it returns.
"""

from datetime import datetime
from threading import Lock

from utils import get_logger


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Recorder(object):
    """
    Serialized append-only writer for visited URLs and crawl errors.

    Opening either file happens in the constructor; an OSError there is a
    configuration error and must abort the run before workers start.
    """

    def __init__(self, output_file, error_log):
        self.logger = get_logger("RECORDER")
        self.output_path = output_file
        self.error_path = error_log

        self.visited_lock = Lock()
        self.error_lock = Lock()
        self.visited_count = 0
        self.error_count = 0

        self._output = open(output_file, "w", encoding="utf-8")
        try:
            self._errors = open(error_log, "a", encoding="utf-8")
        except OSError:
            self._output.close()
            raise
        self.logger.info(f"Writing visited URLs to {output_file}, errors to {error_log}")

    def record_visited(self, url):
        with self.visited_lock:
            self._output.write(f"{url}\n")
            self._output.flush()
            self.visited_count += 1

    def record_error(self, message, timestamp=None):
        """Append `[timestamp] message` to the error log."""
        if timestamp is None:
            timestamp = datetime.now()
        with self.error_lock:
            self._errors.write(f"[{timestamp.strftime(TIMESTAMP_FORMAT)}] {message}\n")
            self._errors.flush()
            self.error_count += 1

    def close(self):
        with self.visited_lock:
            if not self._output.closed:
                self._output.close()
        with self.error_lock:
            if not self._errors.closed:
                self._errors.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
