from configparser import ConfigParser
from threading import Lock

import pytest

from crawler.recorder import Recorder
from utils.config import Config
from utils.download import FetchError
from utils.response import Response


class FakeSite(object):
    """In-memory fetcher: maps canonical URLs to HTML bodies."""

    def __init__(self, pages, failures=(), content_types=None):
        self.pages = pages
        self.failures = set(failures)
        self.content_types = content_types or {}
        self.lock = Lock()
        self.fetched = []

    def __call__(self, url, config, logger=None):
        with self.lock:
            self.fetched.append(url)
        if url in self.failures:
            raise FetchError(url, "simulated network error")
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status=404)
        headers = {"Content-Type": self.content_types.get(url, "text/html; charset=utf-8")}
        return Response(url, 200, self.pages[url].encode("utf-8"), headers)


def links_page(*hrefs):
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return f"<html><body>{anchors}</body></html>"


@pytest.fixture
def make_config():
    def _make(**crawler_options):
        cparser = ConfigParser()
        options = {"THREADCOUNT": "4", "TIMEOUT": "2"}
        options.update({k.upper(): str(v) for k, v in crawler_options.items()})
        cparser.read_dict({"CRAWLER": options})
        return Config(cparser)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def recorder(tmp_path):
    rec = Recorder(str(tmp_path / "visited.txt"), str(tmp_path / "errors.log"))
    yield rec
    rec.close()


def read_lines(path):
    with open(path, encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.strip()]
