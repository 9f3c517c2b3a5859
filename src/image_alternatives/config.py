"""Search configuration."""

from pydantic import Field, field_validator
from pydantic.dataclasses import dataclass

from image_alternatives.errors import InvalidConfig

__all__ = ['SearchConfig', 'DEFAULT_ALTERNATIVES_COUNT', 'DEFAULT_SAMPLES_COUNT']

DEFAULT_ALTERNATIVES_COUNT = 5
DEFAULT_SAMPLES_COUNT = 3


@dataclass(frozen=True)
class SearchConfig:
    """
    Immutable settings shared by every search.

    alternatives_count: maximum number of alternative images considered per
        search. Lower values make searches faster but may miss the best copy.
    samples_count: number of highest FFT frequency buckets summed into the
        detail score.
    """

    alternatives_count: int = Field(default=DEFAULT_ALTERNATIVES_COUNT)
    samples_count: int = Field(default=DEFAULT_SAMPLES_COUNT)

    @field_validator("alternatives_count", "samples_count")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Reject non-positive counts."""
        if v <= 0:
            raise InvalidConfig(f"{info.field_name} should be positive, got {v}")
        return v
