"""CSV rendering of a rule set."""

import csv
import io
from typing import Sequence

from ledgerrules.domain.entities import AutomationRule

CSV_HEADER = [
    "Priority",
    "CreditOrDebit",
    "AccountingAccount",
    "ThirdPartyCode",
    "RuleName",
    "Keyword1",
    "Keyword2",
    "Keyword3",
    "KeywordMatching",
    "RestrictedBankAccounts",
    "MinConfidence",
]
METRICS_HEADER = ["Precision", "Coverage"]


def rule_to_row(rule: AutomationRule, with_metrics: bool = False) -> list[str]:
    """Convert a rule to a CSV row, optionals rendered as empty strings."""
    row = [
        str(rule.priority),
        rule.direction.value,
        rule.accounting_account,
        rule.third_party_code or "",
        rule.rule_name,
        rule.keyword1 or "",
        rule.keyword2 or "",
        rule.keyword3 or "",
        rule.keyword_matching.value,
        rule.restricted_bank_accounts_text or "",
        f"{rule.min_confidence:.2f}",
    ]
    if with_metrics:
        row.extend([f"{rule.precision:.2f}", str(rule.coverage)])
    return row


def export_rules_csv(rules: Sequence[AutomationRule], with_metrics: bool = False) -> str:
    """Render rules as CSV text.

    Args:
        rules: Rules in final order
        with_metrics: If True, append Precision and Coverage columns

    Returns:
        CSV document including the header line
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER + METRICS_HEADER if with_metrics else CSV_HEADER)
    for rule in rules:
        writer.writerow(rule_to_row(rule, with_metrics))
    return buffer.getvalue()
