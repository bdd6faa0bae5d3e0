"""Domain layer for ledgerrules."""

from ledgerrules.domain.generator import RuleGenerationService
from ledgerrules.domain.thresholds import (
    AdaptiveThresholdPolicy,
    FixedThresholdPolicy,
    ThresholdPolicy,
)

__all__ = [
    "RuleGenerationService",
    "ThresholdPolicy",
    "AdaptiveThresholdPolicy",
    "FixedThresholdPolicy",
]
