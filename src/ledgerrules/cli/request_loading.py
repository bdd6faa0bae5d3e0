"""Helpers turning CLI arguments into a generation request."""

from typing import Optional

from ledgerrules.config import GeneratorConfig
from ledgerrules.domain.entities import Direction, RuleGenerationRequest
from ledgerrules.domain.generator import RuleGenerationService
from ledgerrules.sources.factories import create_entry_source


def load_request(debit_file: str, credit_file: str) -> RuleGenerationRequest:
    """Load both entry files into a generation request.

    Raises:
        SourceError: If a file is missing, not JSON or unreadable
        ValidationError: If an entry cannot be mapped
    """
    debit_entries = create_entry_source(debit_file, Direction.DEBIT).load_entries()
    credit_entries = create_entry_source(credit_file, Direction.CREDIT).load_entries()
    return RuleGenerationRequest(
        debit_entries=tuple(debit_entries),
        credit_entries=tuple(credit_entries),
    )


def build_service(
    config: GeneratorConfig,
    min_frequency: Optional[int] = None,
    min_coverage: Optional[int] = None,
) -> RuleGenerationService:
    """Create the generation service, explicit thresholds winning over config."""
    merged = config.with_thresholds(min_frequency, min_coverage)
    return RuleGenerationService(threshold_policy=merged.threshold_policy())
