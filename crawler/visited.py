"""
visited.py - Seen-URL Registry

A URL is claimed the moment it is accepted for enqueue, not after it is
processed, so two workers extracting the same link can never both queue it.
"""

from threading import Lock


class VisitedSet(object):
    """Thread-safe set of canonical URLs, never shrinking during a run."""

    def __init__(self):
        self._lock = Lock()
        self._seen = set()

    def try_claim(self, url):
        """Insert `url` if absent. True only for the call that inserted it."""
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
            return True

    def __contains__(self, url):
        with self._lock:
            return url in self._seen

    def __len__(self):
        with self._lock:
            return len(self._seen)
