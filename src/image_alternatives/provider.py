"""Candidate providers locating alternative copies of an image on the web."""

import logging
import re
from typing import List, Protocol
from urllib.parse import unquote, urlparse

import requests
from pydantic import Field
from pydantic.dataclasses import dataclass

from image_alternatives.config import SearchConfig
from image_alternatives.errors import SearchUnavailable
from image_alternatives.fetcher import USER_AGENT
from image_alternatives.selector import CandidateDescriptor

logger = logging.getLogger(__name__)

__all__ = ['CandidateProvider', 'GoogleCandidateProvider']

GOOGLE_IMG_SEARCH_URL = "https://images.google.com/searchbyimage"

RESULT_PAGE_URL_RE = re.compile(r'href="(/search\?[^"]*?tbs=simg:[^,]+?&amp;.+?)"')
IMAGE_URL_RE = re.compile(r'"ou":"(http.+?)"')
IMAGE_SIZE_RE = re.compile(r'"oh":(?P<height>\d+),"ou":"http.+?","ow":(?P<width>\d+)')


class CandidateProvider(Protocol):
    """Anything able to list alternative copies of a source image."""

    def search(self, source_url: str) -> List[CandidateDescriptor]:
        """
        Return alternatives of the source image, bigger images first (best effort).

        Raises:
            SearchUnavailable: If no results page could be located or parsed
        """
        ...


@dataclass
class GoogleCandidateProvider:
    """
    Finds alternatives with Google's "search by image" results page.

    The markup this relies on is undocumented and changes without notice;
    everything that knows about it lives in this class.
    """

    config: SearchConfig = Field(default_factory=SearchConfig)
    timeout: float = Field(default=10.0, gt=0.0)

    def search(self, source_url: str) -> List[CandidateDescriptor]:
        # 1. Run the reverse image search, following redirects to the local Google host
        response = self._get(
            GOOGLE_IMG_SEARCH_URL, params={"image_url": source_url}, allow_redirects=True
        )
        redirected_host = urlparse(response.url).netloc

        # 2. Find the link to the visually similar images page
        match = RESULT_PAGE_URL_RE.search(response.text)
        if not match:
            raise SearchUnavailable("Result page URL not found")
        href = match.group(1).replace("&amp;", "&")

        # 3. Open the results page
        results_url = f"https://{redirected_host}{href}"
        logger.debug(f"Results page: {results_url}")
        response = self._get(results_url, allow_redirects=False)

        return self.parse_results(response.text)

    def parse_results(self, page: str) -> List[CandidateDescriptor]:
        """Extract image URLs and sizes from a results page."""
        sizes = IMAGE_SIZE_RE.finditer(page)
        result = []
        for url_match in IMAGE_URL_RE.finditer(page):
            url = unquote(unquote(url_match.group(1)))

            size_match = next(sizes, None)
            if size_match is None:
                raise SearchUnavailable("Failed to parse results page")

            result.append(CandidateDescriptor(
                url=url,
                width=int(size_match.group("width")),
                height=int(size_match.group("height")),
            ))
            if len(result) == self.config.alternatives_count:
                break

        logger.info(f"Found {len(result)} alternative images")
        return result

    def _get(self, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise SearchUnavailable(f"Search request failed: {e}") from e

        if response.status_code != requests.codes.ok:
            raise SearchUnavailable(f"Unexpected response status code {response.status_code}")
        return response
