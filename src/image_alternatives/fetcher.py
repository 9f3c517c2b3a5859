"""Download and decode images."""

import logging
from pathlib import Path
from typing import Union

import requests
from pydantic import Field
from pydantic.dataclasses import dataclass

from image_alternatives.errors import FetchFailed, InvalidImage
from image_alternatives.imaging import ImageSample, decode_image, load_image

logger = logging.getLogger(__name__)

__all__ = ['ImageFetcher', 'USER_AGENT']

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass
class ImageFetcher:
    """Fetches images over HTTP (or from disk) as grayscale samples."""

    timeout: float = Field(default=10.0, gt=0.0)
    user_agent: str = Field(default=USER_AGENT)

    def __call__(self, url: str) -> ImageSample:
        return self.fetch(url)

    def fetch(self, url: str) -> ImageSample:
        """
        Download an image and decode it to grayscale.

        Raises:
            FetchFailed: On network errors, non-success status or undecodable content
        """
        headers = {"User-Agent": self.user_agent, "Referer": url}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchFailed(url, str(e)) from e

        content_type = response.headers.get("Content-Type", "").lower()
        logger.debug(f"Fetched {url} ({len(response.content)} bytes, {content_type or 'unknown type'})")

        try:
            return decode_image(response.content)
        except InvalidImage as e:
            raise FetchFailed(url, str(e)) from e

    def load(self, image_path: Union[str, Path]) -> ImageSample:
        """Load a local image file, raising FetchFailed when it is missing or unreadable."""
        try:
            return load_image(image_path)
        except (FileNotFoundError, InvalidImage) as e:
            raise FetchFailed(str(image_path), str(e)) from e
