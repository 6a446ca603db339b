"""
Search provider definitions and result extraction.

Everything that depends on a search engine's markup lives here: the query
endpoint, the selector for result links and the name of the query parameter
carrying the real destination of a result's redirect link.
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, quote_plus, urljoin, urlsplit

from bs4 import BeautifulSoup

from domain_finder.models import NotFound, Resolution, Resolved

# Initialize logger
log = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}

# letters (including IDN), digits, hyphens, underscores and dots
_HOST_RE = re.compile(r"[\w.-]+")


@dataclass(frozen=True)
class SearchProvider:
    """A search engine results page and how to read its first result."""
    name: str
    url: str
    result_selector: str
    redirect_param: str

    def query_url(self, query: str) -> str:
        """
        Build the results page URL for a query.

        Args:
            query: Free-text search query

        Returns:
            Search URL with the query URL-escaped
        """
        return self.url.format(query=quote_plus(query))

    def extract(self, html: str, base_url: str = "") -> Resolution:
        return extract_resolution(html, base_url, self)


DUCKDUCKGO = SearchProvider(
    name="DuckDuckGo",
    url="https://duckduckgo.com/html/?q={query}",
    result_selector="a.result__a",
    redirect_param="uddg",
)


def _hostname(url: str) -> Optional[str]:
    """
    Return the host of an absolute http(s) URL, or None if the URL is malformed.

    Rejects URLs with a non-http scheme, an empty host, characters not allowed
    in a host name, or a port that is not a number in 0-65535.
    """
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
        parts.port  # raises ValueError for a bad port
    except ValueError:
        return None

    if parts.scheme not in ALLOWED_SCHEMES or not host:
        return None

    if "[" in parts.netloc:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return None
        return host

    if not _HOST_RE.fullmatch(host):
        return None
    return host


def extract_resolution(html: str, base_url: str = "",
                       provider: SearchProvider = DUCKDUCKGO) -> Resolution:
    """
    Read the first result link of a rendered results page.

    The result anchor points at the provider's redirect endpoint; the real
    destination travels in ``provider.redirect_param``. Only the hostname of
    that destination is kept.

    Args:
        html: Rendered page content
        base_url: URL the page was loaded from, used to resolve relative hrefs
        provider: Search provider whose markup the page follows

    Returns:
        Resolved(hostname), or NotFound when there is no usable first result
    """
    soup = BeautifulSoup(html or "", "html.parser")
    link = soup.select_one(provider.result_selector)
    if link is None:
        return NotFound()

    href = link.get("href")
    if not href:
        return NotFound()

    try:
        query = urlsplit(urljoin(base_url, href)).query
    except ValueError:
        log.debug("Unparseable result link %r on %s", href, base_url)
        return NotFound()

    targets = parse_qs(query).get(provider.redirect_param)
    if not targets:
        return NotFound()

    # malformed destinations count as a miss, not as an error
    host = _hostname(targets[0])
    if host is None:
        log.debug("Unparseable redirect target %r on %s", targets[0], base_url)
        return NotFound()
    return Resolved(host)
