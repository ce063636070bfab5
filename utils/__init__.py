"""
utils/__init__.py - Shared Helpers

Logging setup and URL canonicalization used by every crawler component.
"""

import os
import logging
from urllib.parse import urljoin, urlparse, urlunparse, urldefrag


LOG_DIR = "Logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name, filename=None):
    """
    Return a logger writing to Logs/<filename>.log and to the console.

    Several loggers may share one file (all workers log to Worker.log).
    Handlers are attached only the first time a name is requested.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)

    os.makedirs(LOG_DIR, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    fh = logging.FileHandler(os.path.join(LOG_DIR, f"{filename if filename else name}.log"))
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)
    logger.propagate = False
    return logger


def normalize(url, base=None):
    """
    Canonicalize a discovered link.

    Resolves `url` against `base`, drops the fragment, lowercases scheme
    and host and removes default ports. Returns None when the link is not
    an absolute http(s) URL after resolution or cannot be parsed.

    normalize(normalize(x)) == normalize(x) for every x that normalizes.
    """
    if not url:
        return None
    url = url.strip()
    try:
        joined, _ = urldefrag(urljoin(base, url) if base else url)
        parsed = urlparse(joined)
        scheme = parsed.scheme.lower()
        if scheme not in ("http", "https"):
            return None

        hostname = (parsed.hostname or "").lower()
        if not hostname:
            return None
        port = parsed.port  # ValueError on junk like :99999 or :abc
    except ValueError:
        return None

    if ":" in hostname:
        hostname = f"[{hostname}]"
    if port is None or (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    else:
        netloc = f"{hostname}:{port}"

    return urlunparse((scheme, netloc, parsed.path or "/", parsed.params, parsed.query, ""))
