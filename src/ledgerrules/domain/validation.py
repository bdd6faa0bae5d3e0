"""Cross-validation of draft rules against the full corpus."""

from dataclasses import replace
from typing import Optional, Sequence

from ledgerrules.domain.entities import (
    AutomationRule,
    BusinessCategory,
    DatasetAnalysis,
    RuleMeasurement,
    RuleOrigin,
    RuleSetMetrics,
    RuleStatus,
    Thresholds,
    TransactionEntry,
)
from ledgerrules.domain.matching import normalize_label, replay_rule
from ledgerrules.domain.synthesis import ENTITY_CONFIDENCE, OPERATION_CONFIDENCE
from ledgerrules.domain.thresholds import meets_threshold
from ledgerrules.logging import get_logger

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.70
MAX_CONFIDENCE = 0.99

SMALL_DATASET_SIZE = 100
LARGE_DATASET_SIZE = 500

PRECISION_BOOST = 0.05
BOOSTED_PRECISION_CAP = 0.95
TRUSTED_CATEGORIES = (BusinessCategory.PUBLIC_INSTITUTION, BusinessCategory.BANK)

ENTITY_MIN_PRECISION = 0.80
OPERATION_MIN_PRECISION = 0.60
OPERATION_MIN_COVERAGE = 1


def adjust_confidence(baseline: float, coverage: int, dataset_size: int) -> float:
    """Refine a baseline confidence using the rule's share of the corpus.

    Small corpora reward rules covering a larger share (more evidence).
    Large corpora penalize rules covering a large share, which tend to be
    dominant but imprecise patterns. Result is clamped to [0.70, 0.99].
    """
    ratio = coverage / dataset_size if dataset_size > 0 else 0.0

    if dataset_size < SMALL_DATASET_SIZE:
        adjustment = 0.05 * ratio
    elif dataset_size >= LARGE_DATASET_SIZE and ratio > 0.2:
        adjustment = -min(0.10, (ratio - 0.2) * 0.25)
    else:
        adjustment = 0.0

    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, baseline + adjustment))


def boost_precision(precision: float) -> float:
    """Apply the trusted-category precision boost without lowering a measurement."""
    return max(precision, min(BOOSTED_PRECISION_CAP, precision + PRECISION_BOOST))


class RuleValidator:
    """Replays draft rules over the corpus and applies quality gates."""

    def __init__(
        self,
        entries: Sequence[TransactionEntry],
        analysis: DatasetAnalysis,
        thresholds: Thresholds,
    ):
        """Initialize validator.

        Args:
            entries: Full corpus
            analysis: Dataset analysis of the same corpus
            thresholds: Active thresholds
        """
        self.entries = tuple(entries)
        self.analysis = analysis
        self.thresholds = thresholds
        self._labels = [normalize_label(entry.label) for entry in self.entries]

    def measure(self, rule: AutomationRule) -> RuleMeasurement:
        """Replay one rule over the corpus."""
        return replay_rule(rule, self.entries, self._labels)

    def validate(self, drafts: Sequence[AutomationRule]) -> list[AutomationRule]:
        """Validate drafts, dropping those failing their quality gate.

        Args:
            drafts: Draft rules

        Returns:
            Validated rules in draft order
        """
        validated = []
        for draft in drafts:
            rule = self.validate_rule(draft)
            if rule is not None:
                validated.append(rule)

        logger.debug("Validation kept %d of %d draft rules", len(validated), len(drafts))
        return validated

    def validate_rule(self, draft: AutomationRule) -> Optional[AutomationRule]:
        """Validate one draft.

        Returns:
            The validated rule, or None when it fails its gate
        """
        rule = self.apply_measurement(draft, self.measure(draft))
        if not self.passes_gate(rule):
            logger.debug(
                "Discarded %s (precision %.2f, coverage %d)",
                rule.rule_name,
                rule.precision,
                rule.coverage,
            )
            return None
        return rule

    def apply_measurement(
        self, rule: AutomationRule, measurement: RuleMeasurement
    ) -> AutomationRule:
        """Return the validated state of a rule for a given replay."""
        precision = measurement.precision
        if rule.origin == RuleOrigin.ENTITY and rule.category in TRUSTED_CATEGORIES:
            precision = boost_precision(precision)

        return replace(
            rule,
            coverage=measurement.coverage,
            precision=precision,
            min_confidence=adjust_confidence(
                self.baseline_confidence(rule),
                measurement.coverage,
                self.analysis.total_entries,
            ),
            examples=measurement.examples,
            status=RuleStatus.VALIDATED,
        )

    def baseline_confidence(self, rule: AutomationRule) -> float:
        if rule.origin == RuleOrigin.OPERATION and rule.operation_type is not None:
            return OPERATION_CONFIDENCE[rule.operation_type]
        if rule.category is not None:
            return ENTITY_CONFIDENCE[rule.category]
        return rule.min_confidence

    def passes_gate(self, rule: AutomationRule) -> bool:
        """Check a validated rule against the gate of its origin."""
        if rule.origin == RuleOrigin.OPERATION:
            return rule.precision >= OPERATION_MIN_PRECISION and rule.coverage >= OPERATION_MIN_COVERAGE
        return rule.precision >= ENTITY_MIN_PRECISION and meets_threshold(
            rule.coverage, self.thresholds.min_coverage
        )

    def compute_metrics(self, rules: Sequence[AutomationRule]) -> RuleSetMetrics:
        """Aggregate precision and coverage over a whole rule set."""
        total_matches = 0
        correct_matches = 0
        matched: set[int] = set()

        for rule in rules:
            measurement = self.measure(rule)
            total_matches += measurement.coverage
            correct_matches += measurement.correct_matches
            matched.update(measurement.matched_indices)

        return RuleSetMetrics(
            total_entries=len(self.entries),
            total_matches=total_matches,
            correct_matches=correct_matches,
            matched_entries=len(matched),
        )
