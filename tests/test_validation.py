"""Tests for rule validation against the corpus."""

import pytest

from ledgerrules.domain.analysis import analyze_dataset
from ledgerrules.domain.entities import (
    AutomationRule,
    BusinessCategory,
    Direction,
    OperationType,
    RuleOrigin,
    RuleStatus,
    Thresholds,
)
from ledgerrules.domain.matching import replay_rule
from ledgerrules.domain.validation import RuleValidator, adjust_confidence, boost_precision


def _entity_rule(keyword="APICIL", account="43701700", category=BusinessCategory.PUBLIC_INSTITUTION, **fields):
    values = dict(
        priority=1,
        direction=Direction.DEBIT,
        accounting_account=account,
        rule_name=f"{category.value}_{keyword}",
        keywords=(keyword,),
        origin=RuleOrigin.ENTITY,
        category=category,
        min_confidence=0.95,
        coverage=99,
        examples=("stale example",),
    )
    values.update(fields)
    return AutomationRule(**values)


def _operation_rule(keyword="PRLV", account="60610000", **fields):
    values = dict(
        priority=60,
        direction=Direction.DEBIT,
        accounting_account=account,
        rule_name=f"Operation_DirectDebit_{account}",
        keywords=(keyword,),
        origin=RuleOrigin.OPERATION,
        operation_type=OperationType.DIRECT_DEBIT,
        min_confidence=0.90,
    )
    values.update(fields)
    return AutomationRule(**values)


def _validator(entries, thresholds=Thresholds(1, 1)):
    return RuleValidator(entries, analyze_dataset(entries), thresholds)


class TestAdjustConfidence:
    """Tests for adjust_confidence."""

    def test_small_dataset_rewards_coverage(self):
        assert adjust_confidence(0.80, 10, 50) == pytest.approx(0.81)

    def test_medium_dataset_is_unchanged(self):
        assert adjust_confidence(0.80, 200, 300) == pytest.approx(0.80)

    def test_large_dataset_penalizes_dominant_rules(self):
        assert adjust_confidence(0.80, 300, 600) == pytest.approx(0.725)

    def test_large_dataset_penalty_is_capped(self):
        assert adjust_confidence(0.90, 1000, 1000) == pytest.approx(0.80)

    def test_large_dataset_small_share_is_unchanged(self):
        assert adjust_confidence(0.85, 50, 1000) == pytest.approx(0.85)

    @pytest.mark.parametrize(
        "baseline,coverage,size",
        [(0.95, 50, 50), (0.80, 1000, 1000), (0.50, 0, 10), (1.5, 1, 1), (0.80, 0, 0)],
    )
    def test_result_is_clamped(self, baseline, coverage, size):
        assert 0.70 <= adjust_confidence(baseline, coverage, size) <= 0.99


class TestBoostPrecision:
    """Tests for boost_precision."""

    @pytest.mark.parametrize(
        "precision,expected",
        [(0.80, 0.85), (0.92, 0.95), (0.97, 0.97), (1.0, 1.0), (0.0, 0.05)],
    )
    def test_boost(self, precision, expected):
        assert boost_precision(precision) == pytest.approx(expected)


class TestRuleValidator:
    """Tests for RuleValidator."""

    def test_validated_rule_reflects_replay(self, make_entry):
        entries = [
            make_entry("VIR SEPA APICIL PREVOYANCE 1", "43701700"),
            make_entry("VIR SEPA APICIL PREVOYANCE 2", "43701700"),
            make_entry("VIR APICIL", "43701700", direction=Direction.CREDIT),
            make_entry("VIR DUPONT", "40100000"),
        ]
        [rule] = _validator(entries).validate([_entity_rule()])

        assert rule.status == RuleStatus.VALIDATED
        assert rule.coverage == 2
        assert rule.precision == 1.0
        assert rule.examples == ("VIR SEPA APICIL PREVOYANCE 1", "VIR SEPA APICIL PREVOYANCE 2")
        assert rule.min_confidence == pytest.approx(0.975)

    def test_validation_does_not_mutate_draft(self, make_entry):
        draft = _entity_rule()
        _validator([make_entry("VIR APICIL", "43701700")]).validate([draft])
        assert draft.status == RuleStatus.DRAFT
        assert draft.coverage == 99

    def test_trusted_category_precision_is_boosted(self, make_entry):
        entries = [make_entry("PRLV CPAM", "43100000")] * 4 + [make_entry("PRLV CPAM", "46700000")]
        [rule] = _validator(entries).validate([_entity_rule("CPAM", "43100000")])
        assert rule.precision == pytest.approx(0.85)

    def test_generic_precision_is_not_boosted(self, make_entry):
        entries = [make_entry("VIR DUPONT", "40100000")] * 4 + [make_entry("VIR DUPONT", "40200000")]
        [rule] = _validator(entries).validate(
            [_entity_rule("DUPONT", "40100000", category=BusinessCategory.GENERIC)]
        )
        assert rule.precision == pytest.approx(0.80)

    def test_imprecise_entity_rule_is_discarded(self, make_entry):
        entries = [make_entry("VIR DUPONT", "40100000")] * 3 + [make_entry("VIR DUPONT", "40200000")] * 2
        rules = _validator(entries).validate(
            [_entity_rule("DUPONT", "40100000", category=BusinessCategory.GENERIC)]
        )
        assert rules == []

    def test_entity_rule_below_min_coverage_is_discarded(self, make_entry):
        entries = [make_entry("VIR APICIL", "43701700")]
        assert _validator(entries, Thresholds(1, 2)).validate([_entity_rule()]) == []

    def test_operation_gate_is_lower(self, make_entry):
        entries = [make_entry("PRLV EDF", "60610000")] * 2 + [make_entry("PRLV ORANGE", "62600000")]
        [rule] = _validator(entries, Thresholds(10, 10)).validate([_operation_rule()])
        assert rule.precision == pytest.approx(2 / 3)
        assert rule.coverage == 3

    def test_operation_rule_below_gate_is_discarded(self, make_entry):
        entries = [make_entry("PRLV EDF", "60610000"), make_entry("PRLV ORANGE", "62600000")]
        assert _validator(entries).validate([_operation_rule()]) == []

    def test_rule_without_matches_is_discarded(self, make_entry):
        entries = [make_entry("VIR DUPONT", "40100000")]
        assert _validator(entries).validate([_entity_rule(), _operation_rule()]) == []

    def test_bank_restriction_limits_matches(self, make_entry):
        entries = [
            make_entry("PRLV URSSAF", "45100300", bank_account="512100"),
            make_entry("PRLV URSSAF", "40110000", bank_account="512000"),
        ]
        rule = _entity_rule("URSSAF", "45100300", restricted_bank_accounts=("512100",))
        [validated] = _validator(entries).validate([rule])
        assert validated.coverage == 1
        assert validated.precision == 1.0

    def test_coverage_matches_replay(self, make_entry):
        entries = [make_entry("PRLV EDF", "60610000")] * 3 + [make_entry("prlv edf", "60610000")]
        validator = _validator(entries)
        [rule] = validator.validate([_operation_rule()])
        assert rule.coverage == replay_rule(rule, entries).coverage == 4

    def test_compute_metrics(self, make_entry):
        entries = [
            make_entry("PRLV EDF", "60610000"),
            make_entry("PRLV EDF", "60610000"),
            make_entry("PRLV ORANGE", "62600000"),
            make_entry("VIR DUPONT", "40100000"),
        ]
        validator = _validator(entries)
        metrics = validator.compute_metrics(
            [_operation_rule(), _entity_rule("EDF", "60610000", category=BusinessCategory.GENERIC)]
        )
        assert metrics.total_entries == 4
        assert metrics.total_matches == 5
        assert metrics.correct_matches == 4
        assert metrics.matched_entries == 3
        assert metrics.coverage_rate == 0.75
