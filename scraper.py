import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup, SoupStrainer
from bs4.builder import ParserRejectedMarkup

from utils import normalize


# Anchor-like elements whose href leads to another page
LINK_STRAINER = SoupStrainer(["a", "area"], href=True)

# Tolerant scan used when the markup defeats the structural parser
HREF_PATTERN = re.compile(
    r"""<(?:a|area)\b[^>]*?\bhref\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)

SKIP_PREFIXES = ("javascript:", "mailto:", "tel:", "data:", "#")

# non-html file extensions: media, archives, documents, binaries
SKIP_EXTENSIONS = re.compile(
    r".*\.(css|js|bmp|gif|jpe?g|ico|webp|svg"
    + r"|png|tiff?|mid|mp2|mp3|mp4"
    + r"|wav|avi|mov|mpeg|ram|m4v|mkv|ogg|ogv|webm|pdf"
    + r"|ps|eps|tex|ppt|pptx|doc|docx|xls|xlsx|names"
    + r"|data|dat|exe|bz2|tar|msi|bin|7z|psd|dmg|iso"
    + r"|epub|dll|cnf|tgz|sha1"
    + r"|thmx|mso|arff|rtf|jar|csv"
    + r"|rm|smil|wmv|swf|wma|zip|rar|gz"
    + r"|woff2?|ttf|eot|map"
    + r"|img|sql|apk|ppsx|odc|war|db|lif)$"
)


def scraper(resp, config):
    """
    Yield the canonical, crawlable links found on a fetched page.

    Relative links resolve against resp.url (the URL after redirects).
    Links that fail to canonicalize or fail is_valid are dropped silently.
    """
    if not resp.is_html:
        return
    for href in extract_next_links(resp.content):
        link = normalize(href, resp.url)
        if link and is_valid(link, config):
            yield link


def extract_next_links(content):
    """
    Lazily yield raw href values from <a>/<area> tags in document order.

    Broken markup never fails the document: whatever lxml can recover is
    used, and if the parser rejects the input outright the regex scan
    picks up what it can.
    """
    if not content:
        return

    try:
        soup = BeautifulSoup(content, "lxml", parse_only=LINK_STRAINER)
    except (ParserRejectedMarkup, ValueError, TypeError):
        yield from _scan_hrefs(content)
        return

    for tag in soup.find_all(["a", "area"], href=True):
        href = tag["href"].strip()
        if href and not href.lower().startswith(SKIP_PREFIXES):
            yield href


def _scan_hrefs(content):
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    for match in HREF_PATTERN.finditer(content):
        href = next((g for g in match.groups() if g is not None), "").strip()
        if href and not href.lower().startswith(SKIP_PREFIXES):
            yield href


def is_valid(url, config=None):
    """Decide whether a canonical URL is worth enqueueing."""
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        return False

    hostname = parsed.hostname
    if hostname is None:
        return False

    if config is not None:
        if len(url) > config.max_url_length:
            return False
        if config.allowed_domains and not any(
            hostname == domain.lstrip(".") or hostname.endswith("." + domain.lstrip("."))
            for domain in config.allowed_domains
        ):
            return False

    return not SKIP_EXTENSIONS.match(parsed.path.lower())
