"""Fakes standing in for the Playwright page and the HTTP fetcher."""
from seocheck.fetcher import FetchResult

GOOD_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Example Widgets | Handmade Widgets for Every Home</title>
  <meta name="description" content="Browse our collection of handmade widgets crafted from sustainable materials, with free shipping on every order and a lifetime repair guarantee.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://example.com/">
  <link rel="icon" href="/favicon.ico">
  <meta property="og:title" content="Example Widgets">
  <meta property="og:description" content="Handmade widgets">
  <meta property="og:image" content="https://example.com/og.png">
  <meta property="og:url" content="https://example.com/">
  <meta property="og:type" content="website">
  <meta name="twitter:card" content="summary_large_image">
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Example"}</script>
</head>
<body>
  <nav aria-label="Breadcrumb"><a href="/">Home</a></nav>
  <h1>Handmade Widgets</h1>
  <h2>Our Collection</h2>
  <p>Every widget is made by hand in our workshop.</p>
  <img src="/img/widget.png" alt="Blue oak widget on a workbench" width="400" height="300">
  <a href="/shop">Shop all widgets</a>
  <a href="https://partner.example.org/">Our partner store</a>
</body>
</html>
"""

# one dict answers both the timing and the accessibility evaluations
DEFAULT_EVALUATION = {
    "loadTime": 1200,
    "domContentLoaded": 800,
    "firstContentfulPaint": 400,
    "landmarks": 2,
    "skipLinks": 1,
    "positiveTabIndex": 0,
    "negativeTabIndex": 0,
}


class FakePage:
    def __init__(self, url="https://example.com/", html=GOOD_HTML, evaluation=None, evaluate_error=None):
        self.url = url
        self.html = html
        self.evaluation = dict(DEFAULT_EVALUATION) if evaluation is None else evaluation
        self.evaluate_error = evaluate_error
        self.evaluate_calls = 0
        self.goto_calls = 0

    async def evaluate(self, script):
        self.evaluate_calls += 1
        if self.evaluate_error is not None:
            raise self.evaluate_error
        return self.evaluation

    async def content(self):
        return self.html

    async def goto(self, url, **kwargs):
        self.goto_calls += 1
        raise AssertionError("checkers must not navigate the shared page")


class FakeFetcher:
    """Maps URL -> FetchResult or exception; anything else answers 404."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        r = self.responses.get(url)
        if isinstance(r, BaseException):
            raise r
        if r is None:
            return FetchResult(url=url, final_url=url, status_code=404, text="")
        return r


def ok_text(url, text, status=200):
    return FetchResult(url=url, final_url=url, status_code=status, text=text)
