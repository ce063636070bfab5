"""
crawler/__init__.py - Crawler Orchestrator

Coordinates one bounded-depth crawl run:
- Seeds the frontier with the start URL at depth 0
- Spawns a fixed pool of worker threads
- Waits for quiescence (or cancellation), then joins the pool

Lifecycle: SEEDED -> RUNNING -> QUIESCENT -> STOPPED
"""

from dataclasses import dataclass

from utils import get_logger, normalize
from utils.download import download
from crawler.frontier import Frontier, WorkItem
from crawler.visited import VisitedSet
from crawler.worker import Worker


SEEDED = "SEEDED"
RUNNING = "RUNNING"
QUIESCENT = "QUIESCENT"
STOPPED = "STOPPED"


@dataclass
class CrawlStats:
    """Summary of a finished run."""
    pages_visited: int = 0
    fetch_errors: int = 0
    items_enqueued: int = 0
    items_completed: int = 0
    deepest_level: int = 0
    cancelled: bool = False


class Crawler(object):
    """
    Multi-threaded, depth-bounded web crawler coordinator.

    Creates the shared frontier and visited set, seeds them, and runs
    config.threads_count workers until no work is left anywhere.
    """

    def __init__(self, config, start_url, max_depth, recorder,
                 frontier_factory=Frontier, worker_factory=Worker, fetcher=download):
        """
        Initialize the crawler and seed the frontier.

        Args:
            config: Configuration object (threads_count, timeout, filters, ...)
            start_url: Seed URL; canonicalized before use
            max_depth: Positive depth bound; depth == max_depth is a leaf
            recorder: Shared Recorder for visited output and errors
            frontier_factory: Factory for creating the frontier (for testing)
            worker_factory: Factory for creating workers (for testing)
            fetcher: Fetch callable handed to every worker

        Raises:
            ValueError: if max_depth is not positive or start_url is unusable
        """
        if max_depth <= 0:
            raise ValueError(f"Maximum depth must be a positive integer, got {max_depth}")
        seed = normalize(start_url)
        if seed is None:
            raise ValueError(f"Invalid start URL: {start_url!r}")

        self.config = config
        self.logger = get_logger("CRAWLER")
        self.max_depth = max_depth
        self.recorder = recorder
        self.fetcher = fetcher
        self.worker_factory = worker_factory
        self.workers = []

        self.frontier = frontier_factory()
        self.visited = VisitedSet()
        self.visited.try_claim(seed)
        self.frontier.push(WorkItem(seed, 0))
        self.seed = seed
        self.state = SEEDED

    def start_async(self):
        """
        Spawn worker threads without blocking.

        All workers are constructed before any is started. If a thread
        cannot be started the frontier is cancelled, the workers already
        running are joined and the error is re-raised.
        """
        self.workers = [
            self.worker_factory(worker_id, self.config, self.frontier, self.visited,
                                self.recorder, self.max_depth, fetcher=self.fetcher)
            for worker_id in range(self.config.threads_count)
        ]
        started = []
        try:
            for worker in self.workers:
                worker.start()
                started.append(worker)
        except RuntimeError:
            self.logger.error(
                f"Could not start worker {len(started)} of {len(self.workers)}, aborting.")
            self.frontier.cancel()
            for worker in started:
                worker.join()
            self.workers = started
            self.state = STOPPED
            raise
        self.state = RUNNING
        self.logger.info(
            f"Crawling {self.seed} to depth {self.max_depth} "
            f"with {len(self.workers)} workers.")

    def start(self, timeout=None):
        """
        Run the crawl to completion and return its CrawlStats.

        Args:
            timeout: Optional wall-clock bound in seconds; when it expires
                the run is cancelled and in-flight fetches are left to
                finish within their own request timeout.
        """
        self.start_async()
        try:
            self.wait(timeout)
        except KeyboardInterrupt:
            self.logger.warning("Interrupted, cancelling crawl.")
            self.cancel()
            raise
        finally:
            self.join()
        return self.stats()

    def wait(self, timeout=None):
        """Block until the frontier is quiescent; cancel on timeout."""
        if self.frontier.wait_quiescent(timeout):
            self.state = QUIESCENT
            self.logger.info("No work left, stopping workers.")
        elif not self.frontier.cancelled:
            self.logger.warning(f"Run timeout of {timeout}s reached, cancelling crawl.")
            self.cancel()

    def cancel(self):
        """Stop the run: every pop() returns the stop signal from now on."""
        self.frontier.cancel()

    def join(self):
        """Wait for all worker threads to complete."""
        for worker in self.workers:
            worker.join()
        self.state = STOPPED
        stats = self.stats()
        self.logger.info(
            f"Crawl finished: {stats.pages_visited} pages visited, "
            f"{stats.fetch_errors} errors, {stats.items_completed}/{stats.items_enqueued} "
            f"items completed, deepest level {stats.deepest_level}"
            f"{' (cancelled)' if stats.cancelled else ''}.")

    def stats(self):
        return CrawlStats(
            pages_visited=self.recorder.visited_count,
            fetch_errors=self.recorder.error_count,
            items_enqueued=self.frontier.pushed,
            items_completed=self.frontier.completed,
            deepest_level=self.frontier.max_depth_seen,
            cancelled=self.frontier.cancelled,
        )
