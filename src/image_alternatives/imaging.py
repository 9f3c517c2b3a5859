"""Grayscale pixel grids, decoding and rescaling."""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from image_alternatives.errors import InvalidImage

logger = logging.getLogger(__name__)

__all__ = ['ImageSample', 'to_grayscale', 'decode_image', 'load_image', 'rescale']

SUPPORTED_SUFFIXES = [".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"]
MIN_DIMENSION = 2


@dataclass(frozen=True, eq=False)
class ImageSample:
    """
    Immutable grayscale pixel grid.

    ``pixels`` is a read-only float32 array of shape (height, width) holding
    intensities in the 0-255 range.
    """

    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.array(self.pixels, dtype=np.float32)
        if pixels.ndim != 2:
            raise InvalidImage(f"Expected 2D array, got {pixels.ndim}D array with shape {pixels.shape}")
        if pixels.size == 0:
            raise InvalidImage("Image array is empty")
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def max_dimension(self) -> int:
        return max(self.width, self.height)

    def __repr__(self) -> str:
        return f"ImageSample({self.width}x{self.height})"


def to_grayscale(image: Image.Image) -> ImageSample:
    """
    Convert a decoded Pillow image to an ImageSample.

    Every image goes through Pillow's "L" conversion (ITU-R 601-2 luma), so
    scores of differently encoded contenders stay comparable.
    """
    if image.mode != "L":
        logger.debug(f"Converting image from {image.mode} to grayscale")
        image = image.convert("L")
    return ImageSample(np.asarray(image, dtype=np.float32))


def decode_image(data: bytes) -> ImageSample:
    """
    Decode encoded image bytes (JPEG, PNG, WebP, ...) into a grayscale sample.

    Raises:
        InvalidImage: If the bytes cannot be decoded
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise InvalidImage(f"Failed to decode image: {e}") from e
    return to_grayscale(img)


def load_image(image_path: Union[str, Path]) -> ImageSample:
    """
    Load an image from disk and convert it to grayscale.

    Args:
        image_path: Path to the image file

    Returns:
        Grayscale ImageSample

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidImage: If the format is unsupported or decoding fails
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise InvalidImage(f"Unsupported image format: {path.suffix}")

    logger.debug(f"Loading image: {image_path}")
    return decode_image(path.read_bytes())


def rescale(sample: ImageSample, target_max_dimension: int) -> ImageSample:
    """
    Resample a sample so that its larger dimension equals target_max_dimension.

    The aspect ratio is preserved by rounding the smaller dimension. Shrinking
    uses an antialiasing Lanczos filter, enlarging uses bicubic interpolation.
    Nearest neighbour is never used.

    Args:
        sample: Source grayscale sample
        target_max_dimension: Desired size of the larger side

    Returns:
        Rescaled sample, or ``sample`` itself when it is already at the target size

    Raises:
        InvalidImage: If the sample is smaller than 2x2 or the target is not positive
    """
    if sample.width < MIN_DIMENSION or sample.height < MIN_DIMENSION:
        raise InvalidImage(f"Image too small to rescale: {sample.width}x{sample.height}")
    if target_max_dimension <= 0:
        raise InvalidImage(f"Target dimension should be positive, got {target_max_dimension}")

    current = sample.max_dimension
    if current == target_max_dimension:
        return sample

    scale = target_max_dimension / current
    if sample.width >= sample.height:
        new_w = target_max_dimension
        new_h = max(min(MIN_DIMENSION, new_w), round(sample.height * scale))
    else:
        new_h = target_max_dimension
        new_w = max(min(MIN_DIMENSION, new_h), round(sample.width * scale))

    resample = Image.Resampling.LANCZOS if scale < 1 else Image.Resampling.BICUBIC
    img = Image.fromarray(sample.pixels.copy())
    resized = img.resize((new_w, new_h), resample)

    logger.debug(
        f"Rescaled image from {sample.width}x{sample.height} to {new_w}x{new_h} "
        f"(scale: {scale:.3f}, filter: {resample.name})"
    )

    # Interpolation overshoots near edges
    return ImageSample(np.clip(np.asarray(resized, dtype=np.float32), 0.0, 255.0))
