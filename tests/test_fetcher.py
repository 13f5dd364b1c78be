import asyncio
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import httpx  # noqa: E402

from cv_analyzer.core.config import Settings  # noqa: E402
from cv_analyzer.schemas.analysis import JobPosting  # noqa: E402
from cv_analyzer.services.fetcher import (  # noqa: E402
    FETCH_FAILED_TEXT,
    POSTING_SEPARATOR,
    combine_postings,
    fetch_postings,
    readable_text,
)

ARTICLE_HTML = """
<html>
  <head><title>Python Developer</title><script>var tracking = 1;</script></head>
  <body>
    <nav>Strona główna | Oferty | Kontakt</nav>
    <article>
      <h1>Python Developer</h1>
      <p>Szukamy doświadczonego programisty Python do zespołu budującego platformę analityczną.</p>
      <p>Wymagania: Django, PostgreSQL, Docker oraz co najmniej trzy lata doświadczenia komercyjnego.</p>
      <p>Oferujemy pracę zdalną, prywatną opiekę medyczną i budżet szkoleniowy.</p>
    </article>
    <footer>Polityka cookies</footer>
  </body>
</html>
"""


def _handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/ok":
        return httpx.Response(200, html=ARTICLE_HTML)
    if path == "/empty":
        return httpx.Response(200, html="<html><body></body></html>")
    if path == "/timeout":
        raise httpx.ReadTimeout("timed out", request=request)
    return httpx.Response(404, text="not found")


class FetchPostingsTests(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(fetch_block_private_hosts=False, posting_max_chars=5000)
        self.transport = httpx.MockTransport(_handler)

    def _fetch(self, urls, settings=None):
        return asyncio.run(fetch_postings(urls, settings or self.settings, transport=self.transport))

    def test_readable_posting_text(self):
        [posting] = self._fetch(["https://jobs.example.com/ok"])
        self.assertTrue(posting.fetched)
        self.assertIn("programisty Python", posting.text)
        self.assertNotIn("tracking", posting.text)
        self.assertNotIn("  ", posting.text)

    def test_failures_become_sentinel_and_keep_order(self):
        postings = self._fetch(
            [
                "https://jobs.example.com/missing",
                "https://jobs.example.com/ok",
                "https://jobs.example.com/timeout",
                "https://jobs.example.com/empty",
            ]
        )
        self.assertEqual([p.fetched for p in postings], [False, True, False, False])
        self.assertEqual(postings[0].text, FETCH_FAILED_TEXT)
        self.assertIn("404", postings[0].error)
        self.assertIn("Timed out", postings[2].error)

    def test_invalid_scheme_is_not_fatal(self):
        [posting] = self._fetch(["ftp://jobs.example.com/ok"])
        self.assertFalse(posting.fetched)

    def test_private_hosts_are_blocked(self):
        settings = Settings(fetch_block_private_hosts=True)
        [posting] = self._fetch(["http://127.0.0.1/ok"], settings)
        self.assertFalse(posting.fetched)
        self.assertEqual(posting.text, FETCH_FAILED_TEXT)

    def test_posting_text_is_clamped(self):
        settings = Settings(fetch_block_private_hosts=False, posting_max_chars=50)
        [posting] = self._fetch(["https://jobs.example.com/ok"], settings)
        self.assertEqual(len(posting.text), 51)
        self.assertTrue(posting.text.endswith("…"))

    def test_no_urls(self):
        self.assertEqual(self._fetch([]), [])


class CombinePostingsTests(unittest.TestCase):
    def test_all_failed_gives_single_sentinel(self):
        postings = [
            JobPosting(url=f"https://jobs.example.com/{i}", text=FETCH_FAILED_TEXT, fetched=False)
            for i in range(3)
        ]
        self.assertEqual(combine_postings(postings), FETCH_FAILED_TEXT)

    def test_joins_fetched_texts_only(self):
        postings = [
            JobPosting(url="a", text="pierwsze"),
            JobPosting(url="b", text=FETCH_FAILED_TEXT, fetched=False),
            JobPosting(url="c", text="drugie"),
        ]
        self.assertEqual(combine_postings(postings), f"pierwsze{POSTING_SEPARATOR}drugie")


class ReadableTextTests(unittest.TestCase):
    def test_empty_html(self):
        self.assertEqual(readable_text(""), "")

    def test_short_page_falls_back_to_body_text(self):
        text = readable_text("<html><body><div>Krótka oferta: tester manualny</div></body></html>")
        self.assertIn("tester manualny", text)


if __name__ == "__main__":
    unittest.main()
