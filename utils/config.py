"""
config.py - Crawler Configuration

Wraps a ConfigParser (normally loaded from config.ini) and exposes the
settings the crawler needs as plain attributes. Values supplied on the
command line are applied on top by launch.py.
"""

DEFAULT_USER_AGENT = "DepthCrawler/1.0"


class Config(object):
    """
    Typed view over the [IDENTIFICATION], [CRAWLER] and [FILTER] sections.

    Missing options fall back to defaults; present but invalid values
    raise ValueError so the run aborts before any worker starts.
    """

    def __init__(self, config):
        self.user_agent = config.get(
            "IDENTIFICATION", "USERAGENT", fallback=DEFAULT_USER_AGENT).strip()

        self.threads_count = config.getint("CRAWLER", "THREADCOUNT", fallback=4)
        self.output_file = config.get("CRAWLER", "OUTPUTFILE", fallback="OPCrawler.txt")
        self.error_log = config.get("CRAWLER", "ERRORLOG", fallback="crawl_errors.log")
        self.timeout = config.getfloat("CRAWLER", "TIMEOUT", fallback=10.0)
        self.follow_redirects = config.getboolean("CRAWLER", "FOLLOWREDIRECTS", fallback=True)
        self.max_url_length = config.getint("CRAWLER", "MAXURLLENGTH", fallback=1024)
        self.run_timeout = config.getfloat("CRAWLER", "RUNTIMEOUT", fallback=0.0)

        domains = config.get("FILTER", "ALLOWEDDOMAINS", fallback="")
        self.allowed_domains = [d.strip().lower() for d in domains.split(",") if d.strip()]

        self.validate()

    def validate(self):
        if self.threads_count < 1:
            raise ValueError(f"THREADCOUNT must be at least 1, got {self.threads_count}")
        if self.timeout <= 0:
            raise ValueError(f"TIMEOUT must be positive, got {self.timeout}")
        if self.run_timeout < 0:
            raise ValueError(f"RUNTIMEOUT must not be negative, got {self.run_timeout}")
        if self.max_url_length < 1:
            raise ValueError(f"MAXURLLENGTH must be at least 1, got {self.max_url_length}")
        if not self.output_file or not self.error_log:
            raise ValueError("OUTPUTFILE and ERRORLOG must be set")
