"""Command line interface for finding and scoring image alternatives."""

import argparse
import logging
import sys
from typing import List, Optional

from image_alternatives.config import DEFAULT_ALTERNATIVES_COUNT, DEFAULT_SAMPLES_COUNT, SearchConfig
from image_alternatives.errors import ImageSearchError
from image_alternatives.fetcher import ImageFetcher
from image_alternatives.imaging import rescale
from image_alternatives.scoring import DetailScorer
from image_alternatives.searcher import ReverseImageSearcher


def run_best(args: argparse.Namespace) -> int:
    """Search for the best quality copy of an image URL."""
    config = SearchConfig(alternatives_count=args.alternatives, samples_count=args.samples)
    searcher = ReverseImageSearcher(
        config=config,
        fetch=ImageFetcher(timeout=args.timeout),
        max_workers=args.workers,
        fallback_to_source=not args.no_fallback,
    )

    best = searcher.find_best_alternative(args.url)

    print(f"Best image: {best.descriptor.url}")
    print(f"Score: {best.score}")
    print(f"Size: {best.descriptor.width}x{best.descriptor.height}")
    print(f"Source: {'yes' if best.is_source else 'no'}")
    return 0


def run_score(args: argparse.Namespace) -> int:
    """Print the detail score of local image files."""
    scorer = DetailScorer(samples_count=args.samples)
    fetcher = ImageFetcher()

    samples = [(path, fetcher.load(path)) for path in args.paths]
    target = args.target_size
    if target is None and args.common_size:
        target = max(sample.max_dimension for _, sample in samples)

    for path, sample in samples:
        if target is not None:
            sample = rescale(sample, target)
        analysis = scorer.analyze(sample)
        print(f"{path}: {analysis.score} ({sample.width}x{sample.height})")
        if args.buckets:
            print(f"  highest buckets: {analysis.normalized[-args.samples:].tolist()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='image-alternatives',
        description='Find the most detailed copy of an image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Find the best copy of a web image
  image-alternatives best https://example.com/picture.jpg

  # Compare local files at a common size
  image-alternatives score small.jpg large.png --common-size
        """
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--samples',
        type=int,
        default=DEFAULT_SAMPLES_COUNT,
        help=f'Number of highest frequency buckets summed into the score (default: {DEFAULT_SAMPLES_COUNT})'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    best = subparsers.add_parser('best', help='Find the best quality copy of an image URL')
    best.add_argument('url', type=str, help='URL of the source image')
    best.add_argument(
        '--alternatives',
        type=int,
        default=DEFAULT_ALTERNATIVES_COUNT,
        help=f'Maximum number of alternatives to compare (default: {DEFAULT_ALTERNATIVES_COUNT})'
    )
    best.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Number of alternatives downloaded and scored concurrently (default: 1)'
    )
    best.add_argument(
        '--timeout',
        type=float,
        default=10.0,
        help='Download timeout in seconds (default: 10)'
    )
    best.add_argument(
        '--no-fallback',
        action='store_true',
        help='Fail instead of returning the source when the search is unavailable'
    )
    best.set_defaults(func=run_best)

    score = subparsers.add_parser('score', help='Print detail scores of local image files')
    score.add_argument('paths', nargs='+', type=str, help='Image files to score')
    size_group = score.add_mutually_exclusive_group()
    size_group.add_argument(
        '--target-size',
        type=int,
        default=None,
        help='Rescale every image to this larger dimension before scoring'
    )
    size_group.add_argument(
        '--common-size',
        action='store_true',
        help='Rescale every image to the largest dimension among them'
    )
    score.add_argument(
        '--buckets',
        action='store_true',
        help='Also print the normalized buckets summed into each score'
    )
    score.set_defaults(func=run_score)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for command-line usage."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        return args.func(args)
    except ImageSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
