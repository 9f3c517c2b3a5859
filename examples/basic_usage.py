"""Basic usage example for the reverse image searcher."""

import logging
import sys
from pathlib import Path

from image_alternatives import ReverseImageSearcher, SearchConfig, rescale, score_detail_level
from image_alternatives.errors import ImageSearchError
from image_alternatives.fetcher import ImageFetcher

# Configure logging
logging.basicConfig(level=logging.INFO)


# Example: Find the best copy of a web image
def find_best_copy(url: str):
    """Search the web for a more detailed copy of an image."""
    searcher = ReverseImageSearcher(
        config=SearchConfig(alternatives_count=5, samples_count=3),
        max_workers=4,
    )

    try:
        best = searcher.find_best_alternative(url)
    except ImageSearchError as e:
        print(f"Search failed: {e}")
        return

    print(f"\nBest copy of: {url}")
    print(f"URL: {best.descriptor.url}")
    print(f"Size: {best.descriptor.width}x{best.descriptor.height}")
    print(f"Detail score: {best.score}")
    print(f"Is source: {best.is_source}")


# Example: Compare local copies of the same picture
def compare_local_copies(paths: list[Path]):
    """Score local files after bringing them to a common size."""
    fetcher = ImageFetcher()
    samples = [(path, fetcher.load(path)) for path in paths]
    target = max(sample.max_dimension for _, sample in samples)

    print(f"\nScores at common size {target}px:")
    for path, sample in samples:
        score = score_detail_level(rescale(sample, target))
        print(f"  {path.name}: {score}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python basic_usage.py <image URL> | <file> <file> ...")
        sys.exit(1)

    if sys.argv[1].startswith(("http://", "https://")):
        find_best_copy(sys.argv[1])
    else:
        compare_local_copies([Path(p) for p in sys.argv[1:]])
