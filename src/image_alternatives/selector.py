"""Selection of the most detailed image among a source and its alternatives."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, NamedTuple, Optional, Sequence

from pydantic import Field
from pydantic.dataclasses import dataclass

from image_alternatives.config import SearchConfig
from image_alternatives.errors import FetchFailed, InvalidImage
from image_alternatives.imaging import ImageSample, rescale
from image_alternatives.scoring import DetailScorer

logger = logging.getLogger(__name__)

__all__ = ['CandidateDescriptor', 'ScoredCandidate', 'AlternativeSelector', 'SOURCE_INDEX']

SOURCE_INDEX = 0

Fetch = Callable[[str], ImageSample]


class CandidateDescriptor(NamedTuple):
    """URL and reported size of an image. A size of 0 means unknown."""

    url: str
    width: int = 0
    height: int = 0

    @property
    def max_dimension(self) -> int:
        return max(self.width, self.height)

    @property
    def has_size(self) -> bool:
        return self.width > 0 and self.height > 0

    def __str__(self) -> str:
        return f"{self.url} ({self.width}x{self.height})"


class ScoredCandidate(NamedTuple):
    """A contender together with its detail score and input position."""

    descriptor: CandidateDescriptor
    score: int
    index: int  # 0 is the source, candidates follow in input order

    @property
    def is_source(self) -> bool:
        return self.index == SOURCE_INDEX


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


@dataclass
class AlternativeSelector:
    """
    Picks the most detailed contender among a source image and its candidates.

    Every contender is rescaled to the largest known size before scoring so
    that scores are comparable. Candidates that cannot be fetched or decoded
    are skipped; the source is always a valid fallback.
    """

    config: SearchConfig = Field(default_factory=SearchConfig)
    max_workers: int = Field(default=1, ge=1)

    def __post_init__(self):
        """Initialize the scorer."""
        self.scorer = DetailScorer.from_config(self.config)

    def target_dimension(self, source: ImageSample, candidates: Sequence[CandidateDescriptor]) -> int:
        """Largest known dimension across all contenders."""
        known = [c.max_dimension for c in candidates if c.has_size]
        return max([source.max_dimension] + known)

    def score_sample(self, sample: ImageSample, target_max_dimension: int) -> int:
        """Rescale a sample to the common size and score it."""
        start = time.perf_counter()
        resized = rescale(sample, target_max_dimension)
        logger.debug(f"Resize time: {_elapsed_ms(start):.1f}ms")

        start = time.perf_counter()
        score = self.scorer.score(resized)
        logger.debug(f"Score time: {_elapsed_ms(start):.1f}ms")
        return score

    def _score_candidate(
        self, candidate: CandidateDescriptor, fetch: Fetch, target_max_dimension: int
    ) -> Optional[int]:
        logger.debug(f"Processing image {candidate}")
        start = time.perf_counter()
        try:
            sample = fetch(candidate.url)
        except FetchFailed as e:
            logger.warning(f"Failed to download image: {candidate}, skipping ({e.reason})")
            return None
        logger.debug(f"Download time: {_elapsed_ms(start):.1f}ms")

        try:
            score = self.score_sample(sample, target_max_dimension)
        except InvalidImage as e:
            logger.warning(f"Unusable image: {candidate}, skipping ({e})")
            return None

        logger.debug(f"Score: {score} for {candidate}")
        return score

    def select_best(
        self,
        source: CandidateDescriptor,
        source_sample: ImageSample,
        candidates: Sequence[CandidateDescriptor],
        fetch: Fetch,
    ) -> ScoredCandidate:
        """
        Choose the contender with the highest detail score.

        Args:
            source: Descriptor of the source image
            source_sample: Already fetched pixels of the source image
            candidates: Alternative images, truncated to ``alternatives_count``
            fetch: Callable returning an ImageSample for a URL, raising FetchFailed

        Returns:
            ScoredCandidate of the winner. Ties go to the earlier contender,
            so the source wins against equally scored candidates.

        Raises:
            InvalidImage: If the source image cannot be scored
        """
        candidates = list(candidates)[:self.config.alternatives_count]
        target = self.target_dimension(source_sample, candidates)

        logger.info(f"Comparing source against {len(candidates)} alternatives at {target}px")

        best = ScoredCandidate(
            descriptor=source,
            score=self.score_sample(source_sample, target),
            index=SOURCE_INDEX,
        )
        logger.debug(f"Source score: {best.score}")

        scores = self._score_all(candidates, fetch, target)

        for index, (candidate, score) in enumerate(zip(candidates, scores), start=1):
            if score is not None and score > best.score:
                best = ScoredCandidate(descriptor=candidate, score=score, index=index)

        logger.info(f"Best image: {best.descriptor} (score: {best.score}, source: {best.is_source})")

        return best

    def _score_all(
        self, candidates: List[CandidateDescriptor], fetch: Fetch, target: int
    ) -> List[Optional[int]]:
        """Scores in input order, None for skipped candidates."""
        if self.max_workers == 1 or len(candidates) <= 1:
            return [self._score_candidate(c, fetch, target) for c in candidates]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda c: self._score_candidate(c, fetch, target), candidates))
