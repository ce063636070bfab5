"""
worker.py - Crawler Worker Threads

Each worker claims items from the shared frontier, fetches the page,
extracts and canonicalizes its links, enqueues the unseen ones one level
deeper, records the URL and marks the item done.

Key role: executes the crawl loop; never holds a frontier lock while fetching
"""

from threading import Thread

from utils.download import download, close_session, FetchError
from utils import get_logger
from crawler.frontier import WorkItem
import scraper


class Worker(Thread):
    """
    Worker thread driving fetch -> extract -> enqueue -> record.

    Runs until the frontier hands back the stop signal (None), which
    happens only at quiescence or on cancellation.
    """

    def __init__(self, worker_id, config, frontier, visited, recorder,
                 max_depth, fetcher=download):
        """
        Args:
            worker_id: Unique identifier for logging
            config: Configuration object (timeout, redirects, filters)
            frontier: Shared Frontier
            visited: Shared VisitedSet
            recorder: Shared Recorder for output and error log
            max_depth: Items at this depth or deeper are recorded, not fetched
            fetcher: Callable with the signature of utils.download.download
        """
        self.worker_id = worker_id
        self.logger = get_logger(f"Worker-{worker_id}", "Worker")
        self.config = config
        self.frontier = frontier
        self.visited = visited
        self.recorder = recorder
        self.max_depth = max_depth
        self.fetcher = fetcher
        self.processed = 0
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

    def run(self):
        try:
            while True:
                item = self.frontier.pop()
                if item is None:
                    self.logger.info(
                        f"Frontier stopped. Worker-{self.worker_id} exiting "
                        f"after {self.processed} items.")
                    break
                try:
                    self.process(item)
                except Exception as e:
                    # per-item failure; this worker keeps draining the frontier
                    self.logger.exception(f"Unexpected error processing {item.url}")
                    try:
                        self.recorder.record_error(f"unexpected error: {item.url}: {e}")
                    except OSError as log_error:
                        self.logger.error(f"Could not write error log: {log_error}")
                finally:
                    self.processed += 1
                    self.frontier.mark_done()
        finally:
            close_session()

    def process(self, item):
        """Handle one work item. mark_done() is the caller's job."""
        if item.depth >= self.max_depth:
            # leaf: recorded but never fetched or expanded
            self.recorder.record_visited(item.url)
            return

        try:
            resp = self.fetcher(item.url, self.config, self.logger)
        except FetchError as e:
            self.logger.warning(f"Failed to download {item.url}: {e.reason}")
            self.recorder.record_error(f"fetch failed: {e}")
            return

        self.logger.info(f"Downloaded {item.url}, status <{resp.status}>.")

        added = 0
        try:
            for link in scraper.scraper(resp, self.config):
                if self.visited.try_claim(link):
                    self.frontier.push(WorkItem(link, item.depth + 1))
                    added += 1
        except Exception as e:
            # links enqueued before the failure stay queued
            self.logger.warning(f"Link extraction failed for {item.url}: {e}")
            self.recorder.record_error(f"extract failed: {item.url}: {e}")

        self.logger.debug(f"{item.url} (depth {item.depth}) queued {added} new links")
        self.recorder.record_visited(item.url)
