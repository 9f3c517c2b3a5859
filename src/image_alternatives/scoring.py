"""Frequency domain detail scoring."""

import logging
from typing import NamedTuple

import numpy as np
from pydantic import Field, field_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from image_alternatives.config import DEFAULT_SAMPLES_COUNT, SearchConfig
from image_alternatives.errors import InvalidConfig, InvalidImage
from image_alternatives.imaging import MIN_DIMENSION, ImageSample

logger = logging.getLogger(__name__)

__all__ = ['DetailScorer', 'DetailAnalysis', 'bucket_count', 'score_detail_level']

# Value that the DC bucket is scaled to during normalization
NORMALIZED_DC = 10000.0


class DetailAnalysis(NamedTuple):
    """Result of scoring one sample."""

    score: int
    histogram: np.ndarray  # Raw radial magnitude histogram, bucket 0 is DC
    normalized: np.ndarray  # Integer histogram scaled so that bucket 0 == 10000


def bucket_count(width: int) -> int:
    """Number of radial frequency buckets for a grid of the given width."""
    return (width + 1) // 2 + 1


@pydantic_dataclass
class DetailScorer:
    """
    Scores the level of detail in a grayscale image.

    The image is transformed with a 2D DFT, the spectrum is folded into a 1D
    radial histogram, the histogram is normalized against its DC bucket and
    the ``samples_count`` buckets nearest to the Nyquist edge are summed.
    Bigger scores mean more fine detail. Normalized buckets are truncated to
    integers, so scores are whole numbers and bucket 0 may come out as 9999.
    Scores are only comparable between images of the same content rescaled
    to the same size.
    """

    samples_count: int = Field(default=DEFAULT_SAMPLES_COUNT)

    @field_validator("samples_count")
    @classmethod
    def validate_samples_count(cls, v: int) -> int:
        """Ensure samples_count is positive."""
        if v <= 0:
            raise InvalidConfig(f"samples_count should be positive, got {v}")
        return v

    @classmethod
    def from_config(cls, config: SearchConfig) -> "DetailScorer":
        return cls(samples_count=config.samples_count)

    def compute_spectrum(self, sample: ImageSample) -> np.ndarray:
        """
        Compute the full 2D Discrete Fourier Transform of the sample.

        Args:
            sample: Grayscale sample (H, W)

        Returns:
            Complex-valued, unshifted FFT result (H, W) with DC at [0, 0]

        Raises:
            InvalidImage: If either dimension is below 2
        """
        if sample.width < MIN_DIMENSION or sample.height < MIN_DIMENSION:
            raise InvalidImage(f"Image too small to score: {sample.width}x{sample.height}")

        logger.debug(f"Computing 2D FFT for image shape: {sample.pixels.shape}")
        return np.fft.fft2(sample.pixels.astype(np.float64))

    def fold_spectrum(self, spectrum: np.ndarray) -> np.ndarray:
        """
        Fold a 2D spectrum into a 1D radial magnitude histogram.

        A coefficient at column x, row y lands in bucket
        ``max(x_distance, y_distance)`` where ``y_distance = floor(y * size / H)``
        and ``x_distance`` is x for the first ``size`` columns and ``W - x`` for
        the mirrored remainder.

        Args:
            spectrum: Complex FFT result (H, W)

        Returns:
            Float histogram of ``ceil(W / 2) + 1`` buckets
        """
        h, w = spectrum.shape
        size = bucket_count(w)

        y_distance = (np.arange(h) * size) // h
        x = np.arange(w)
        x_distance = np.where(x < size, x, w - x)

        indices = np.maximum(x_distance[np.newaxis, :], y_distance[:, np.newaxis])
        histogram = np.bincount(indices.ravel(), weights=np.abs(spectrum).ravel(), minlength=size)

        logger.debug(f"Folded {h}x{w} spectrum into {size} buckets")

        return histogram

    def normalize_buckets(self, histogram: np.ndarray) -> np.ndarray:
        """
        Scale the histogram so that bucket 0 becomes 10000, truncating to integers.

        A histogram whose DC bucket is zero (an all-black image) normalizes to zeros.
        """
        dc = histogram[0]
        if dc == 0:
            logger.debug("DC bucket is zero, skipping normalization")
            return np.zeros(len(histogram), dtype=np.int64)

        return np.floor(histogram * NORMALIZED_DC / dc).astype(np.int64)

    def aggregate(self, normalized: np.ndarray) -> int:
        """
        Sum the ``samples_count`` highest-frequency buckets.

        Raises:
            InvalidImage: If the histogram has no more buckets than samples_count
        """
        if self.samples_count >= len(normalized):
            raise InvalidImage(
                f"samples_count ({self.samples_count}) must be less than the "
                f"bucket count ({len(normalized)}) of the scored image"
            )
        return int(normalized[-self.samples_count:].sum())

    def analyze(self, sample: ImageSample) -> DetailAnalysis:
        """
        Run the complete scoring pipeline on a sample.

        Args:
            sample: Grayscale sample, at least 2x2

        Returns:
            DetailAnalysis with the score and both histograms
        """
        spectrum = self.compute_spectrum(sample)
        histogram = self.fold_spectrum(spectrum)
        normalized = self.normalize_buckets(histogram)
        score = self.aggregate(normalized)

        logger.debug(
            f"Detail score: {score} (image: {sample.width}x{sample.height}, "
            f"buckets: {len(histogram)}, samples: {self.samples_count})"
        )

        return DetailAnalysis(score=score, histogram=histogram, normalized=normalized)

    def score(self, sample: ImageSample) -> int:
        """Non-negative detail score of a sample."""
        return self.analyze(sample).score


def score_detail_level(sample: ImageSample, samples_count: int = DEFAULT_SAMPLES_COUNT) -> int:
    """
    Score the level of detail in an image.

    The score can be used to compare the quality of images with the same
    content: a bigger score generally means a sharper, more detailed copy.
    """
    return DetailScorer(samples_count=samples_count).score(sample)
