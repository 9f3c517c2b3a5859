"""Image Alternatives - find the most detailed copy of an image"""

__version__ = "0.1.0"

from .config import SearchConfig
from .errors import FetchFailed, ImageSearchError, InvalidConfig, InvalidImage, SearchUnavailable
from .imaging import ImageSample, rescale
from .scoring import DetailScorer, score_detail_level
from .searcher import ReverseImageSearcher
from .selector import AlternativeSelector, CandidateDescriptor, ScoredCandidate

__all__ = [
    "SearchConfig",
    "ImageSample",
    "rescale",
    "DetailScorer",
    "score_detail_level",
    "AlternativeSelector",
    "CandidateDescriptor",
    "ScoredCandidate",
    "ReverseImageSearcher",
    "ImageSearchError",
    "InvalidConfig",
    "InvalidImage",
    "FetchFailed",
    "SearchUnavailable",
]
