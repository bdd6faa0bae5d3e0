"""JSON rendering of a generation result."""

import json
from dataclasses import asdict
from typing import Any

from ledgerrules.domain.entities import (
    AutomationRule,
    BusinessCategory,
    RuleGenerationResult,
    RuleOrigin,
)


def rule_to_dict(rule: AutomationRule) -> dict[str, Any]:
    """Convert a rule to a JSON-ready dict."""
    return {
        "priority": rule.priority,
        "credit_or_debit": rule.direction.value,
        "accounting_account": rule.accounting_account,
        "third_party_code": rule.third_party_code,
        "rule_name": rule.rule_name,
        "keyword1": rule.keyword1,
        "keyword2": rule.keyword2,
        "keyword3": rule.keyword3,
        "keyword_matching": rule.keyword_matching.value,
        "restricted_bank_accounts": rule.restricted_bank_accounts_text,
        "min_confidence": round(rule.min_confidence, 4),
        "precision": round(rule.precision, 4),
        "coverage": rule.coverage,
        "examples": list(rule.examples),
        "origin": rule.origin.value,
        "category": rule.category.value if rule.category else None,
        "operation_type": rule.operation_type.value if rule.operation_type else None,
        "status": rule.status.value,
    }


def result_to_dict(result: RuleGenerationResult) -> dict[str, Any]:
    """Convert a generation result to statistics, rules and rules by category."""
    rules = [rule_to_dict(rule) for rule in result.rules]

    def entity_rules(category: BusinessCategory) -> list[dict[str, Any]]:
        return [
            data
            for rule, data in zip(result.rules, rules)
            if rule.origin == RuleOrigin.ENTITY and rule.category == category
        ]

    return {
        "statistics": asdict(result.statistics),
        "rules": rules,
        "rules_by_category": {
            "public_institutions": entity_rules(BusinessCategory.PUBLIC_INSTITUTION),
            "banks": entity_rules(BusinessCategory.BANK),
            "generic": entity_rules(BusinessCategory.GENERIC),
            "operations": [
                data
                for rule, data in zip(result.rules, rules)
                if rule.origin == RuleOrigin.OPERATION
            ],
        },
    }


def export_result_json(result: RuleGenerationResult, indent: int = 2) -> str:
    """Render a generation result as a JSON document."""
    return json.dumps(result_to_dict(result), indent=indent, ensure_ascii=False)
