"""Rule generation domain service."""

from typing import Optional

from ledgerrules.domain.analysis import analyze_dataset
from ledgerrules.domain.conflicts import ConflictResolver
from ledgerrules.domain.entities import (
    AutomationRule,
    RuleGenerationRequest,
    RuleGenerationResult,
)
from ledgerrules.domain.entity_extractor import EntityExtractor
from ledgerrules.domain.errors import InvalidRequestError, missing_entry_collection
from ledgerrules.domain.operations import OperationDetector
from ledgerrules.domain.statistics import build_statistics
from ledgerrules.domain.synthesis import RuleSynthesizer
from ledgerrules.domain.thresholds import AdaptiveThresholdPolicy, ThresholdPolicy
from ledgerrules.domain.validation import RuleValidator
from ledgerrules.logging import get_logger

logger = get_logger(__name__)


class RuleGenerationService:
    """Service for mining classification rules from a labeled corpus."""

    def __init__(
        self,
        threshold_policy: Optional[ThresholdPolicy] = None,
        entity_extractor: Optional[EntityExtractor] = None,
        operation_detector: Optional[OperationDetector] = None,
    ):
        """Initialize rule generation service.

        Args:
            threshold_policy: Strategy deriving thresholds from the dataset
                size (defaults to AdaptiveThresholdPolicy)
            entity_extractor: Entity extractor (defaults to the built-in
                vocabulary)
            operation_detector: Operation pattern detector
        """
        self.threshold_policy = threshold_policy or AdaptiveThresholdPolicy()
        self.entity_extractor = entity_extractor or EntityExtractor()
        self.operation_detector = operation_detector or OperationDetector()
        self.synthesizer = RuleSynthesizer()

    def generate_rules(self, request: RuleGenerationRequest) -> list[AutomationRule]:
        """Generate the final ordered rule set for a request.

        Args:
            request: Debit and credit entry collections

        Returns:
            Rules sorted by ascending priority, empty for an empty corpus

        Raises:
            InvalidRequestError: If the request or one of its collections is None
        """
        return list(self.generate(request).rules)

    def generate(self, request: RuleGenerationRequest) -> RuleGenerationResult:
        """Run the full pipeline and return rules with their metrics.

        Args:
            request: Debit and credit entry collections

        Returns:
            RuleGenerationResult with rules, metrics, analysis and statistics

        Raises:
            InvalidRequestError: If the request or one of its collections is None
        """
        self._check_request(request)

        entries = request.all_entries
        analysis = analyze_dataset(entries)
        thresholds = self.threshold_policy.thresholds(analysis.total_entries)
        validator = RuleValidator(entries, analysis, thresholds)

        if not entries:
            logger.info("No entries to analyze, returning an empty rule set")
            return self._result([], request, validator, analysis)

        logger.info(
            "Analyzing %d entries (%d debit, %d credit), thresholds %d/%d",
            analysis.total_entries,
            len(request.debit_entries),
            len(request.credit_entries),
            thresholds.min_frequency,
            thresholds.min_coverage,
        )

        entity_candidates = self.entity_extractor.collect_candidates(entries, thresholds)
        operation_candidates = self.operation_detector.collect_candidates(entries, thresholds)
        drafts = self.synthesizer.synthesize(entity_candidates, operation_candidates)
        validated = validator.validate(drafts)
        rules = ConflictResolver(validator).resolve(validated)

        logger.info(
            "Generated %d rules from %d drafts (%d entity, %d operation candidates)",
            len(rules),
            len(drafts),
            len(entity_candidates),
            len(operation_candidates),
        )
        return self._result(rules, request, validator, analysis)

    @staticmethod
    def _check_request(request: Optional[RuleGenerationRequest]) -> None:
        if request is None:
            raise InvalidRequestError("A rule generation request is required")
        if request.debit_entries is None:
            raise InvalidRequestError(missing_entry_collection("debit"))
        if request.credit_entries is None:
            raise InvalidRequestError(missing_entry_collection("credit"))

    @staticmethod
    def _result(rules, request, validator, analysis) -> RuleGenerationResult:
        metrics = validator.compute_metrics(rules)
        return RuleGenerationResult(
            rules=tuple(rules),
            metrics=metrics,
            analysis=analysis,
            statistics=build_statistics(rules, request, metrics),
        )
