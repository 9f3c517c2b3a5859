"""Reverse image searcher: finds the best quality copy of a web image."""

import logging
from typing import Callable, List, Optional

from image_alternatives.config import SearchConfig
from image_alternatives.errors import SearchUnavailable
from image_alternatives.fetcher import ImageFetcher
from image_alternatives.imaging import ImageSample
from image_alternatives.provider import CandidateProvider, GoogleCandidateProvider
from image_alternatives.selector import AlternativeSelector, CandidateDescriptor, ScoredCandidate

logger = logging.getLogger(__name__)

__all__ = ['ReverseImageSearcher']


class ReverseImageSearcher:
    """
    Searches the web for copies of an image and picks the most detailed one.

    Found images can differ slightly from the source in aspect ratio or
    content (watermarks, small logos) since no similarity check is made.

    Args:
        config: Shared search configuration, defaults to SearchConfig()
        provider: Source of alternative images, defaults to GoogleCandidateProvider
        fetch: Callable returning an ImageSample for a URL, defaults to ImageFetcher
        max_workers: Number of candidates fetched and scored concurrently
        fallback_to_source: When the provider raises SearchUnavailable, return
            the source image instead of propagating the error
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        provider: Optional[CandidateProvider] = None,
        fetch: Optional[Callable[[str], ImageSample]] = None,
        max_workers: int = 1,
        fallback_to_source: bool = True,
    ):
        self.config = config if config is not None else SearchConfig()
        self.provider = provider if provider is not None else GoogleCandidateProvider(config=self.config)
        self.fetch = fetch if fetch is not None else ImageFetcher()
        self.fallback_to_source = fallback_to_source
        self.selector = AlternativeSelector(config=self.config, max_workers=max_workers)

    def find_alternatives(self, source_url: str) -> List[CandidateDescriptor]:
        """
        List copies of the source image found on the web, bigger images first.

        Raises:
            SearchUnavailable: If the provider could not produce results
        """
        return list(self.provider.search(source_url))[:self.config.alternatives_count]

    def find_best_alternative(self, source_url: str) -> ScoredCandidate:
        """
        Find the copy of an image with the highest level of detail.

        The source is fetched once up front; failing to fetch it is fatal.
        Alternatives that cannot be fetched are skipped.

        Returns:
            ScoredCandidate of the winner, which is the source itself when no
            alternative scores strictly higher

        Raises:
            FetchFailed: If the source image cannot be fetched
            SearchUnavailable: If the search fails and fallback_to_source is False
        """
        logger.info(f"Searching alternatives for {source_url}")
        source_sample = self.fetch(source_url)
        source = CandidateDescriptor(url=source_url, width=source_sample.width, height=source_sample.height)

        try:
            alternatives = self.find_alternatives(source_url)
        except SearchUnavailable as e:
            if not self.fallback_to_source:
                raise
            logger.warning(f"Search failed for {source_url}, falling back to source: {e}")
            alternatives = []

        return self.selector.select_best(source, source_sample, alternatives, self.fetch)

    def score_detail_level(self, sample: ImageSample) -> int:
        """Detail score of a single sample using the configured samples_count."""
        return self.selector.scorer.score(sample)
