"""Tests for frequency domain detail scoring."""

import numpy as np
import pytest
from scipy.ndimage import gaussian_filter

from image_alternatives.config import SearchConfig
from image_alternatives.errors import InvalidConfig, InvalidImage
from image_alternatives.imaging import ImageSample, rescale
from image_alternatives.scoring import DetailAnalysis, DetailScorer, bucket_count, score_detail_level


def checkerboard(size: int, square: int) -> np.ndarray:
    """Black and white checkerboard with square x square pixel cells."""
    cells = (np.arange(size) // square) % 2
    return (cells[:, np.newaxis] ^ cells[np.newaxis, :]).astype(np.float32) * 255.0


def horizontal_waves(size: int, cycles: int) -> np.ndarray:
    """Smooth cosine stripes varying along the vertical axis."""
    y = np.arange(size)
    column = 128.0 + 64.0 * np.cos(2 * np.pi * cycles * y / size)
    return np.tile(column[:, np.newaxis], (1, size))


def test_detail_scorer_initialization():
    """Test DetailScorer initialization."""
    assert DetailScorer().samples_count == 3
    assert DetailScorer(samples_count=5).samples_count == 5
    assert DetailScorer.from_config(SearchConfig(samples_count=4)).samples_count == 4


def test_detail_scorer_rejects_non_positive_samples():
    """Test samples_count validation."""
    with pytest.raises(InvalidConfig):
        DetailScorer(samples_count=0)


@pytest.mark.parametrize("width, expected", [(2, 2), (3, 3), (4, 3), (5, 4), (64, 33), (65, 34)])
def test_bucket_count(width, expected):
    """Test bucket count is ceil(W / 2) + 1."""
    assert bucket_count(width) == expected


def test_compute_spectrum():
    """Test 2D FFT computation."""
    scorer = DetailScorer()
    sample = ImageSample(np.random.rand(32, 48) * 255)

    spectrum = scorer.compute_spectrum(sample)

    assert spectrum.shape == (32, 48)
    assert np.iscomplexobj(spectrum)
    # DC term is the sum of all pixels
    assert np.isclose(spectrum[0, 0].real, sample.pixels.astype(np.float64).sum())


def test_compute_spectrum_rejects_tiny_images():
    """Test scoring requires at least 2x2 pixels."""
    scorer = DetailScorer(samples_count=1)
    with pytest.raises(InvalidImage, match="too small"):
        scorer.compute_spectrum(ImageSample(np.zeros((1, 8))))
    with pytest.raises(InvalidImage, match="too small"):
        scorer.score(ImageSample(np.zeros((8, 1))))


def test_fold_spectrum_bucket_assignment():
    """Test coefficients are folded with the max(x, y) distance rule."""
    scorer = DetailScorer()

    # 4x4 grid: size = 3, y distances = [0, 0, 1, 2], x distances = [0, 1, 2, 1]
    histogram = scorer.fold_spectrum(np.ones((4, 4), dtype=complex))

    assert histogram.tolist() == [2.0, 7.0, 7.0]


def test_fold_spectrum_mirrors_columns():
    """Test the right half of each row folds onto the left half."""
    scorer = DetailScorer()
    spectrum = np.zeros((2, 6), dtype=complex)
    spectrum[0, 5] = 3 + 4j  # x distance 6 - 5 = 1

    histogram = scorer.fold_spectrum(spectrum)

    assert len(histogram) == 4
    assert histogram.tolist() == [0.0, 5.0, 0.0, 0.0]


def test_fold_spectrum_uses_row_distance():
    """Test rows map to buckets by floor(y * size / H)."""
    scorer = DetailScorer()
    spectrum = np.zeros((8, 4), dtype=complex)
    spectrum[7, 0] = 2.0  # floor(7 * 3 / 8) = 2

    histogram = scorer.fold_spectrum(spectrum)

    assert histogram.tolist() == [0.0, 0.0, 2.0]


def test_normalize_buckets():
    """Test normalization scales bucket 0 to 10000 and truncates."""
    scorer = DetailScorer()

    assert scorer.normalize_buckets(np.array([4.0, 2.0, 1.0])).tolist() == [10000, 5000, 2500]
    assert scorer.normalize_buckets(np.array([3.0, 1.0, 1.0])).tolist() == [10000, 3333, 3333]


def test_normalize_buckets_zero_dc():
    """Test a zero DC bucket normalizes to zeros instead of dividing by zero."""
    scorer = DetailScorer()
    normalized = scorer.normalize_buckets(np.array([0.0, 0.0, 0.0]))

    assert normalized.tolist() == [0, 0, 0]


def test_aggregate_sums_highest_buckets():
    """Test only the samples_count highest-frequency buckets are summed."""
    scorer = DetailScorer(samples_count=2)
    assert scorer.aggregate(np.array([10000, 5, 7, 9])) == 16


def test_aggregate_requires_more_buckets_than_samples():
    """Test samples_count must be smaller than the bucket count."""
    scorer = DetailScorer(samples_count=3)
    with pytest.raises(InvalidImage, match="must be less than the bucket count"):
        scorer.aggregate(np.array([10000, 1, 2]))

    # 4x4 image has only 3 buckets
    with pytest.raises(InvalidImage):
        scorer.score(ImageSample(np.random.rand(4, 4)))


@pytest.mark.parametrize("shape, samples_count", [((2, 2), 1), ((5, 3), 1), ((16, 16), 3), ((40, 64), 3)])
def test_uniform_image_scores_zero(shape, samples_count):
    """Test a constant image has no detail."""
    sample = ImageSample(np.full(shape, 173.0))
    assert score_detail_level(sample, samples_count=samples_count) == 0


def test_black_image_scores_zero():
    """Test an all-zero image scores 0 without dividing by zero."""
    assert score_detail_level(ImageSample(np.zeros((32, 32)))) == 0


def test_analyze_returns_histograms():
    """Test the complete scoring pipeline result."""
    scorer = DetailScorer()
    sample = ImageSample(checkerboard(64, 8))

    result = scorer.analyze(sample)

    assert isinstance(result, DetailAnalysis)
    assert len(result.histogram) == 33
    assert result.normalized[0] in (9999, 10000)
    assert result.score == int(result.normalized[-3:].sum())
    assert result.score > 0


def test_score_is_deterministic_and_non_negative():
    """Test repeated scoring gives the same non-negative result."""
    rng = np.random.default_rng(42)
    sample = ImageSample(rng.uniform(0, 255, size=(48, 64)))

    first = score_detail_level(sample)
    second = score_detail_level(sample)

    assert first == second
    assert first >= 0
    assert isinstance(first, int)


def test_sharp_image_scores_higher_than_blurred():
    """Test the score drops when the image is smoothed."""
    sharp = checkerboard(64, 8)
    blurred = gaussian_filter(sharp, sigma=2.0, mode="wrap")

    assert score_detail_level(ImageSample(sharp)) > score_detail_level(ImageSample(blurred))


def test_noise_scores_higher_than_blurred_noise():
    """Test fine grained noise loses score when smoothed."""
    rng = np.random.default_rng(7)
    noise = rng.uniform(0, 255, size=(64, 64))
    blurred = gaussian_filter(noise, sigma=1.5, mode="wrap")

    assert score_detail_level(ImageSample(noise)) > score_detail_level(ImageSample(blurred))


def test_scores_comparable_after_rescale():
    """Test the same content scores alike once brought to a common size."""
    large = ImageSample(horizontal_waves(128, 2))
    small = ImageSample(horizontal_waves(64, 2))

    large_score = score_detail_level(large)
    small_score = score_detail_level(rescale(small, 128))

    assert large_score > 0
    assert small_score == pytest.approx(large_score, rel=0.1)
