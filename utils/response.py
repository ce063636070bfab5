class Response(object):
    """Successful fetch result handed from the downloader to a worker."""

    def __init__(self, url, status, content, headers=None):
        # url is the final URL after redirects; relative links resolve against it
        self.url = url
        self.status = status
        self.content = content
        self.headers = headers or {}

    @property
    def content_type(self):
        return (self.headers.get("Content-Type") or "").lower()

    @property
    def is_html(self):
        # servers that omit the header are given the benefit of the doubt
        ctype = self.content_type
        return not ctype or "html" in ctype
