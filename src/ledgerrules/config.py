"""Configuration management for ledgerrules."""

import os
from dataclasses import dataclass
from typing import Optional

from ledgerrules.domain.errors import ValidationError
from ledgerrules.domain.thresholds import (
    AdaptiveThresholdPolicy,
    FixedThresholdPolicy,
    ThresholdPolicy,
)

LOG_FORMATS = ("standard", "json")
OUTPUT_FORMATS = ("csv", "json")


def _int_from_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer, got '{value}'") from e


def _output_format_from_env() -> str:
    value = os.getenv("LEDGERRULES_OUTPUT_FORMAT", "csv").lower()
    if value not in OUTPUT_FORMATS:
        raise ValidationError(
            f"LEDGERRULES_OUTPUT_FORMAT must be one of {', '.join(OUTPUT_FORMATS)}, got '{value}'"
        )
    return value


@dataclass
class GeneratorConfig:
    """Runtime configuration of the command-line generator."""

    log_level: str = "WARNING"
    log_format: str = "standard"
    min_frequency: Optional[int] = None
    min_coverage: Optional[int] = None
    output_format: str = "csv"
    with_metrics: bool = False

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Create config from environment variables."""
        return cls(
            log_level=os.getenv("LEDGERRULES_LOG_LEVEL", "WARNING"),
            log_format=os.getenv("LEDGERRULES_LOG_FORMAT", "standard"),
            min_frequency=_int_from_env("LEDGERRULES_MIN_FREQUENCY"),
            min_coverage=_int_from_env("LEDGERRULES_MIN_COVERAGE"),
            output_format=_output_format_from_env(),
            with_metrics=os.getenv("LEDGERRULES_WITH_METRICS", "false").lower() == "true",
        )

    def with_thresholds(
        self, min_frequency: Optional[int], min_coverage: Optional[int]
    ) -> "GeneratorConfig":
        """Return a copy with explicit thresholds merged over this config."""
        return GeneratorConfig(
            log_level=self.log_level,
            log_format=self.log_format,
            min_frequency=min_frequency if min_frequency is not None else self.min_frequency,
            min_coverage=min_coverage if min_coverage is not None else self.min_coverage,
            output_format=self.output_format,
            with_metrics=self.with_metrics,
        )

    def threshold_policy(self) -> ThresholdPolicy:
        """Build the threshold policy for this config.

        Fixed thresholds are used as soon as either one is set; the missing
        one then takes the value of the other.
        """
        if self.min_frequency is None and self.min_coverage is None:
            return AdaptiveThresholdPolicy()
        if self.min_frequency is None:
            return FixedThresholdPolicy(self.min_coverage, self.min_coverage)
        return FixedThresholdPolicy(self.min_frequency, self.min_coverage)
