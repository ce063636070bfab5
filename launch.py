"""
launch.py - Web Crawler Entry Point

Parses the start URL and depth, loads configuration, opens the output
sinks and runs one crawl to completion.

Usage:
    python launch.py "https://example.com/|3"        # combined argument
    python launch.py https://example.com/ 3          # separate arguments
    python launch.py https://example.com/ 3 --threads 8 --output out.txt
"""

import signal
import sys
from configparser import ConfigParser, Error as ConfigError
from argparse import ArgumentParser

from utils import get_logger, normalize
from utils.config import Config
from crawler import Crawler
from crawler.recorder import Recorder


SEPARATOR = "|"


def build_parser():
    parser = ArgumentParser(
        description="Crawl pages reachable from a start URL up to a maximum link depth.")
    parser.add_argument("target", help=f"Start URL, or '<url>{SEPARATOR}<depth>'")
    parser.add_argument("depth", nargs="?", help="Maximum depth (positive integer)")
    parser.add_argument("--config_file", type=str, default="config.ini",
                        help="Path to configuration file")
    parser.add_argument("--threads", type=int, help="Number of worker threads")
    parser.add_argument("--output", help="File receiving one visited URL per line")
    parser.add_argument("--error_log", help="Timestamped error log file")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--run_timeout", type=float,
                        help="Cancel the whole crawl after this many seconds")
    return parser


def parse_target(target, depth):
    """
    Split the CLI target into (start_url, max_depth).

    Raises:
        ValueError: on a missing/extra depth, a non-integer or
            non-positive depth, or an unusable start URL
    """
    if depth is None:
        if SEPARATOR not in target:
            raise ValueError(f"expected '<url>{SEPARATOR}<depth>' or '<url> <depth>'")
        target, depth = target.rsplit(SEPARATOR, 1)
    elif SEPARATOR in target:
        raise ValueError("depth given twice")

    url = target.strip()
    try:
        max_depth = int(depth)
    except ValueError:
        raise ValueError(f"depth must be an integer, got {depth!r}")
    if max_depth <= 0:
        raise ValueError("Maximum depth must be a positive integer")
    if normalize(url) is None:
        raise ValueError(f"invalid start URL {url!r}")
    return url, max_depth


def load_config(args):
    """Read the config file and apply command-line overrides."""
    cparser = ConfigParser()
    cparser.read(args.config_file)
    config = Config(cparser)

    if args.threads is not None:
        config.threads_count = args.threads
    if args.output:
        config.output_file = args.output
    if args.error_log:
        config.error_log = args.error_log
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.run_timeout is not None:
        config.run_timeout = args.run_timeout
    config.validate()
    return config


def main(argv=None):
    """
    Run one crawl and return the process exit code.

    Configuration problems exit through parser.error (status 2); an
    output sink that cannot be opened or a pool that cannot start
    returns 1. Per-page failures only reach the error log.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        start_url, max_depth = parse_target(args.target, args.depth)
        config = load_config(args)
    except ConfigError as e:
        parser.error(f"invalid configuration file {args.config_file}: {e}")
    except ValueError as e:
        parser.error(str(e))

    logger = get_logger("LAUNCH")
    try:
        recorder = Recorder(config.output_file, config.error_log)
    except OSError as e:
        logger.error(f"Unable to open output sink: {e}")
        sys.stderr.write(f"Error: unable to open output file: {e}\n")
        return 1

    with recorder:
        crawler = Crawler(config, start_url, max_depth, recorder)
        previous = signal.signal(signal.SIGTERM, lambda signum, frame: crawler.cancel())
        try:
            stats = crawler.start(timeout=config.run_timeout or None)
        except RuntimeError as e:
            logger.error(f"Crawler failed to start: {e}")
            return 1
        except KeyboardInterrupt:
            return 130
        finally:
            signal.signal(signal.SIGTERM, previous)

    logger.info(f"Visited {stats.pages_visited} pages, {stats.fetch_errors} errors logged.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
