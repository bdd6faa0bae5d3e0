"""Per-run summary statistics."""

from typing import Sequence

from ledgerrules.domain.entities import (
    AutomationRule,
    BusinessCategory,
    Direction,
    GenerationStatistics,
    RuleGenerationRequest,
    RuleOrigin,
    RuleSetMetrics,
)


def _average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def build_statistics(
    rules: Sequence[AutomationRule],
    request: RuleGenerationRequest,
    metrics: RuleSetMetrics,
) -> GenerationStatistics:
    """Summarize a generation run.

    Args:
        rules: Final rule set
        request: Request the rules were generated from
        metrics: Corpus-wide metrics of the rule set

    Returns:
        GenerationStatistics with the coverage rate expressed as a percentage
    """
    entity_categories = [rule.category for rule in rules if rule.origin == RuleOrigin.ENTITY]

    return GenerationStatistics(
        total_rules=len(rules),
        coverage_rate=metrics.coverage_rate * 100,
        average_precision=_average([rule.precision for rule in rules]),
        average_confidence=_average([rule.min_confidence for rule in rules]),
        debit_rules=sum(1 for rule in rules if rule.direction == Direction.DEBIT),
        credit_rules=sum(1 for rule in rules if rule.direction == Direction.CREDIT),
        debit_entries_count=len(request.debit_entries),
        credit_entries_count=len(request.credit_entries),
        public_institution_rules=entity_categories.count(BusinessCategory.PUBLIC_INSTITUTION),
        bank_rules=entity_categories.count(BusinessCategory.BANK),
        generic_rules=entity_categories.count(BusinessCategory.GENERIC),
        operation_rules=sum(1 for rule in rules if rule.origin == RuleOrigin.OPERATION),
    )
