"""Tests for CSV and JSON rule rendering."""

import csv
import io
import json

import pytest

from ledgerrules.domain.entities import (
    AutomationRule,
    BusinessCategory,
    Direction,
    KeywordMatchingMode,
    OperationType,
    RuleGenerationRequest,
    RuleOrigin,
    RuleStatus,
)
from ledgerrules.domain.generator import RuleGenerationService
from ledgerrules.export.csv_export import CSV_HEADER, export_rules_csv, rule_to_row
from ledgerrules.export.json_export import export_result_json, result_to_dict, rule_to_dict
from ledgerrules.sources.factories import create_entry_source


@pytest.fixture
def restricted_rule():
    return AutomationRule(
        priority=2,
        direction=Direction.DEBIT,
        accounting_account="45100300",
        rule_name="Specialized_PublicInstitution_URSSAF_45100300_ACOMPTE",
        keywords=("URSSAF", "ACOMPTE"),
        keyword_matching=KeywordMatchingMode.ALL,
        third_party_code="URS1",
        restricted_bank_accounts=("512100", "512200"),
        min_confidence=0.9666,
        precision=1.0,
        coverage=12,
        origin=RuleOrigin.ENTITY,
        category=BusinessCategory.PUBLIC_INSTITUTION,
        status=RuleStatus.DEMOTED_KEPT,
    )


@pytest.fixture
def operation_rule():
    return AutomationRule(
        priority=60,
        direction=Direction.CREDIT,
        accounting_account="41100000",
        rule_name="Operation_Transfer_41100000",
        keywords=("VIR",),
        min_confidence=0.8,
        precision=0.625,
        coverage=8,
        origin=RuleOrigin.OPERATION,
        operation_type=OperationType.TRANSFER,
        status=RuleStatus.KEPT,
    )


class TestCsvExport:
    """Tests for CSV export."""

    def test_header(self):
        assert export_rules_csv([]) == (
            "Priority,CreditOrDebit,AccountingAccount,ThirdPartyCode,RuleName,"
            "Keyword1,Keyword2,Keyword3,KeywordMatching,RestrictedBankAccounts,MinConfidence\n"
        )

    def test_rows(self, restricted_rule, operation_rule):
        rows = list(csv.reader(io.StringIO(export_rules_csv([restricted_rule, operation_rule]))))

        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "2",
            "debit",
            "45100300",
            "URS1",
            "Specialized_PublicInstitution_URSSAF_45100300_ACOMPTE",
            "URSSAF",
            "ACOMPTE",
            "",
            "all",
            "512100,512200",
            "0.97",
        ]
        assert rows[2] == [
            "60", "credit", "41100000", "", "Operation_Transfer_41100000",
            "VIR", "", "", "oneof", "", "0.80",
        ]

    def test_restricted_accounts_are_quoted(self, restricted_rule):
        assert '"512100,512200"' in export_rules_csv([restricted_rule])

    def test_metrics_columns(self, operation_rule):
        rows = list(csv.reader(io.StringIO(export_rules_csv([operation_rule], with_metrics=True))))
        assert rows[0][-2:] == ["Precision", "Coverage"]
        assert rows[1][-2:] == ["0.62", "8"]

    def test_row_width_matches_header(self, restricted_rule):
        assert len(rule_to_row(restricted_rule)) == len(CSV_HEADER)
        assert len(rule_to_row(restricted_rule, with_metrics=True)) == len(CSV_HEADER) + 2


class TestJsonExport:
    """Tests for JSON export."""

    def test_rule_to_dict(self, restricted_rule):
        data = rule_to_dict(restricted_rule)
        assert data["credit_or_debit"] == "debit"
        assert data["keyword_matching"] == "all"
        assert data["restricted_bank_accounts"] == "512100,512200"
        assert data["category"] == "PublicInstitution"
        assert data["operation_type"] is None
        assert data["status"] == "DemotedKept"

    def test_result_document(self, debit_file, credit_file):
        request = RuleGenerationRequest(
            debit_entries=tuple(create_entry_source(debit_file, Direction.DEBIT).load_entries()),
            credit_entries=tuple(create_entry_source(credit_file, Direction.CREDIT).load_entries()),
        )
        result = RuleGenerationService().generate(request)

        document = json.loads(export_result_json(result))

        assert document["statistics"]["total_rules"] == len(document["rules"])
        by_category = document["rules_by_category"]
        assert [r["keyword1"] for r in by_category["public_institutions"]] == ["URSSAF", "APICIL"]
        assert [r["keyword1"] for r in by_category["banks"]] == ["BNP"]
        assert len(by_category["generic"]) == 3
        assert by_category["operations"] == []

    def test_empty_result(self):
        result = RuleGenerationService().generate(RuleGenerationRequest())
        document = result_to_dict(result)
        assert document["rules"] == []
        assert document["statistics"]["total_rules"] == 0
