"""Tests for draft rule synthesis."""

from collections import Counter

import pytest

from ledgerrules.domain.entities import (
    BankAccountPattern,
    BusinessCategory,
    Direction,
    EntityCandidate,
    KeywordMatchingMode,
    OperationCandidate,
    OperationType,
    RuleOrigin,
    RuleStatus,
)
from ledgerrules.domain.synthesis import (
    OPERATION_PRIORITY_OFFSET,
    RuleSynthesizer,
    dominant_third_party_code,
    group_bank_accounts,
)


def _entity(name="APICIL", category=BusinessCategory.PUBLIC_INSTITUTION, **fields):
    values = dict(
        name=name,
        direction=Direction.DEBIT,
        category=category,
        frequency=3,
        accounting_accounts=Counter({"43701700": 3}),
        examples=[f"VIR SEPA {name}"],
    )
    values.update(fields)
    return EntityCandidate(**values)


def _pattern(bank_account, account, frequency=2, codes=None):
    return BankAccountPattern(
        bank_account=bank_account,
        frequency=frequency,
        counterpart_accounts=Counter({account: frequency}),
        third_party_codes=Counter(codes or {}),
        examples=[f"PRLV URSSAF {bank_account}"],
    )


@pytest.fixture
def synthesizer():
    return RuleSynthesizer()


class TestDominantThirdPartyCode:
    """Tests for the third-party consistency gate."""

    def test_consistent_code(self):
        assert dominant_third_party_code(Counter({"APIC001": 3})) == "APIC001"

    def test_split_codes(self):
        assert dominant_third_party_code(Counter({"A": 1, "B": 1, "C": 1})) is None

    def test_seventy_percent_is_enough(self):
        assert dominant_third_party_code(Counter({"A": 7, "B": 3})) == "A"
        assert dominant_third_party_code(Counter({"A": 6, "B": 4})) is None

    def test_no_codes(self):
        assert dominant_third_party_code(Counter()) is None


class TestEntityRules:
    """Tests for entity rule creation."""

    def test_single_rule(self, synthesizer):
        entity = _entity(third_party_codes=Counter({"APIC001": 3}))
        [rule] = synthesizer.create_entity_rules(entity, counter=1)

        assert rule.rule_name == "PublicInstitution_APICIL"
        assert rule.keywords == ("APICIL",)
        assert rule.keyword_matching == KeywordMatchingMode.ONE_OF
        assert rule.accounting_account == "43701700"
        assert rule.third_party_code == "APIC001"
        assert rule.min_confidence == 0.95
        assert rule.coverage == 3
        assert rule.origin == RuleOrigin.ENTITY
        assert rule.category == BusinessCategory.PUBLIC_INSTITUTION
        assert rule.status == RuleStatus.DRAFT
        assert rule.restricted_bank_accounts == ()

    @pytest.mark.parametrize(
        "category,confidence",
        [
            (BusinessCategory.PUBLIC_INSTITUTION, 0.95),
            (BusinessCategory.BANK, 0.90),
            (BusinessCategory.GENERIC, 0.80),
        ],
    )
    def test_confidence_by_category(self, synthesizer, category, confidence):
        [rule] = synthesizer.create_entity_rules(_entity(category=category), counter=1)
        assert rule.min_confidence == confidence

    def test_priority_subtracts_category_weight(self, synthesizer):
        [rule] = synthesizer.create_entity_rules(_entity(category=BusinessCategory.GENERIC), counter=10)
        assert rule.priority == 9

    def test_priority_floor(self, synthesizer):
        [rule] = synthesizer.create_entity_rules(_entity(), counter=2)
        assert rule.priority == 1

    def test_bank_account_split(self, synthesizer):
        """Bank accounts resolving to different accounts give restricted rules."""
        entity = _entity(
            name="URSSAF",
            frequency=4,
            accounting_accounts=Counter({"45100300": 2, "40110000": 2}),
            bank_account_patterns={
                "512100": _pattern("512100", "45100300", codes={"URS1": 2}),
                "512000": _pattern("512000", "40110000"),
            },
        )
        rules = synthesizer.create_entity_rules(entity, counter=1)

        assert [(r.accounting_account, r.restricted_bank_accounts) for r in rules] == [
            ("45100300", ("512100",)),
            ("40110000", ("512000",)),
        ]
        assert rules[0].rule_name == "PublicInstitution_URSSAF_45100300"
        assert rules[0].third_party_code == "URS1"
        assert rules[1].third_party_code is None
        assert all(r.coverage == 2 for r in rules)

    def test_bank_accounts_sharing_an_account_are_grouped(self, synthesizer):
        entity = _entity(
            bank_account_patterns={
                "512100": _pattern("512100", "43701700"),
                "512000": _pattern("512000", "43701700"),
            },
        )
        [rule] = synthesizer.create_entity_rules(entity, counter=1)
        assert rule.restricted_bank_accounts == ()

    def test_entity_without_accounts_gives_no_rule(self, synthesizer):
        assert synthesizer.create_entity_rules(_entity(accounting_accounts=Counter()), counter=1) == []


def test_group_bank_accounts():
    groups = group_bank_accounts(
        {
            "A": _pattern("A", "401"),
            "B": _pattern("B", "411"),
            "C": _pattern("C", "401"),
            "D": BankAccountPattern(bank_account="D"),
        }
    )
    assert {account: [p.bank_account for p in patterns] for account, patterns in groups.items()} == {
        "401": ["A", "C"],
        "411": ["B"],
    }


class TestSynthesize:
    """Tests for RuleSynthesizer.synthesize."""

    def test_operation_rules_come_after_entity_rules(self, synthesizer):
        operation = OperationCandidate(
            operation_type=OperationType.DIRECT_DEBIT,
            direction=Direction.DEBIT,
            frequency=4,
            accounting_accounts=Counter({"60610000": 3, "62600000": 1}),
            keywords=Counter({"PRLV": 3, "PRELEVEMENT": 1}),
        )
        rules = synthesizer.synthesize(
            [_entity(), _entity(name="DUPONT", category=BusinessCategory.GENERIC)],
            [operation],
        )

        assert [r.origin for r in rules] == [RuleOrigin.ENTITY, RuleOrigin.ENTITY, RuleOrigin.OPERATION]
        operation_rule = rules[-1]
        assert operation_rule.priority == 3 + OPERATION_PRIORITY_OFFSET
        assert operation_rule.rule_name == "Operation_DirectDebit_60610000"
        assert operation_rule.keywords == ("PRLV",)
        assert operation_rule.min_confidence == 0.90
        assert operation_rule.operation_type == OperationType.DIRECT_DEBIT
        assert max(r.priority for r in rules[:2]) < operation_rule.priority

    def test_operation_without_accounts_is_skipped(self, synthesizer):
        operation = OperationCandidate(
            operation_type=OperationType.TRANSFER,
            direction=Direction.DEBIT,
            frequency=2,
            keywords=Counter({"VIR": 2}),
        )
        assert synthesizer.synthesize([], [operation]) == []

    def test_empty_input(self, synthesizer):
        assert synthesizer.synthesize([], []) == []
