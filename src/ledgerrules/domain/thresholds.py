"""Threshold policies deciding how much evidence a pattern needs."""

from abc import ABC, abstractmethod

from ledgerrules.domain.entities import Thresholds


class ThresholdPolicy(ABC):
    """Strategy mapping a dataset size to minimum frequency and coverage."""

    @abstractmethod
    def thresholds(self, dataset_size: int) -> Thresholds:
        """Return the thresholds to apply for a corpus of ``dataset_size`` entries."""
        pass


class AdaptiveThresholdPolicy(ThresholdPolicy):
    """Reference policy: low bars for small corpora, high bars for large ones."""

    def thresholds(self, dataset_size: int) -> Thresholds:
        if dataset_size < 100:
            return Thresholds(min_frequency=3, min_coverage=2)
        if dataset_size < 500:
            return Thresholds(min_frequency=5, min_coverage=3)
        return Thresholds(min_frequency=10, min_coverage=5)


class FixedThresholdPolicy(ThresholdPolicy):
    """Policy returning the same thresholds whatever the corpus size."""

    def __init__(self, min_frequency: int, min_coverage: int | None = None):
        """Initialize fixed policy.

        Args:
            min_frequency: Minimum candidate frequency
            min_coverage: Minimum validated coverage, defaults to min_frequency
        """
        self.min_frequency = min_frequency
        self.min_coverage = min_frequency if min_coverage is None else min_coverage

    def thresholds(self, dataset_size: int) -> Thresholds:
        return Thresholds(min_frequency=self.min_frequency, min_coverage=self.min_coverage)


def meets_threshold(value: int, threshold: int) -> bool:
    """Check a count against a threshold; non-positive thresholds accept everything."""
    if threshold <= 0:
        return True
    return value >= threshold
