"""Exception hierarchy for alternative image search."""

__all__ = [
    'ImageSearchError',
    'InvalidConfig',
    'InvalidImage',
    'FetchFailed',
    'SearchUnavailable',
]


class ImageSearchError(Exception):
    """Base class for all errors raised by image_alternatives."""


class InvalidConfig(ImageSearchError):
    """A configuration value is out of range (raised when the config is built)."""


class InvalidImage(ImageSearchError):
    """Pixel grid is too small or malformed to be rescaled or scored."""


class FetchFailed(ImageSearchError):
    """An image could not be downloaded or decoded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch image {url}: {reason}")
        self.url = url
        self.reason = reason


class SearchUnavailable(ImageSearchError):
    """The candidate provider could not locate or parse a results page."""
