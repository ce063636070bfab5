"""
download.py - Page Fetcher

Issues one bounded GET request per URL. Any transport failure, timeout
or non-2xx status surfaces as FetchError so the calling worker can log
it and move on.
"""

import time
from threading import local

import requests
from urllib3.exceptions import HTTPError as Urllib3Error

from utils.response import Response


CHUNK_SIZE = 64 * 1024

# one requests.Session per worker thread
_thread_state = local()


class FetchError(Exception):
    """A URL could not be fetched. status is None for transport errors."""

    def __init__(self, url, reason, status=None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


def get_session():
    """Return the calling thread's requests.Session, creating it on first use."""
    session = getattr(_thread_state, "session", None)
    if session is None:
        session = _thread_state.session = requests.Session()
    return session


def close_session():
    """Close the calling thread's session, if it has one."""
    session = getattr(_thread_state, "session", None)
    if session is not None:
        session.close()
        _thread_state.session = None


def download(url, config, logger=None, session=None):
    """
    Fetch `url` and return a Response.

    config.timeout bounds each connect/read step and also the request as
    a whole: the body is streamed and abandoned once the deadline passes.

    Args:
        url: Absolute http(s) URL
        config: Config providing timeout, follow_redirects and user_agent
        logger: Optional logger for debug output
        session: Optional requests.Session; defaults to this thread's session

    Raises:
        FetchError: on network error, timeout, unusable URL or non-success status
    """
    http = session if session is not None else get_session()
    headers = {"User-Agent": config.user_agent}
    deadline = time.monotonic() + config.timeout
    try:
        resp = http.get(url, headers=headers, timeout=config.timeout,
                        allow_redirects=config.follow_redirects, stream=True)
        try:
            if not 200 <= resp.status_code < 300:
                raise FetchError(url, f"HTTP {resp.status_code}", status=resp.status_code)
            chunks = []
            for chunk in resp.iter_content(CHUNK_SIZE):
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise FetchError(url, f"body not received within {config.timeout}s")
            content = b"".join(chunks)
        finally:
            resp.close()
    except requests.Timeout:
        raise FetchError(url, f"timed out after {config.timeout}s")
    except (requests.RequestException, Urllib3Error, ValueError) as e:
        # urllib3 errors such as LocationParseError escape requests unwrapped
        raise FetchError(url, f"{type(e).__name__}: {e}")

    if logger:
        logger.debug(f"GET {url} -> {resp.status_code} ({len(content)} bytes)")

    return Response(resp.url or url, resp.status_code, content, resp.headers)
