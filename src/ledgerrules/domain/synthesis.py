"""Draft rule synthesis from entity and operation candidates."""

from collections import Counter
from typing import Optional, Sequence

from ledgerrules.domain.entities import (
    AutomationRule,
    BankAccountPattern,
    BusinessCategory,
    EntityCandidate,
    KeywordMatchingMode,
    OperationCandidate,
    OperationType,
    RuleOrigin,
)
from ledgerrules.logging import get_logger

logger = get_logger(__name__)

ENTITY_CONFIDENCE = {
    BusinessCategory.PUBLIC_INSTITUTION: 0.95,
    BusinessCategory.BANK: 0.90,
    BusinessCategory.GENERIC: 0.80,
}

OPERATION_CONFIDENCE = {
    OperationType.BANK_FEES: 0.95,
    OperationType.DIRECT_DEBIT: 0.90,
    OperationType.CREDIT_CARD: 0.85,
    OperationType.TRANSFER: 0.80,
}

THIRD_PARTY_CONSISTENCY = 0.7

# Keeps every operation rule behind every entity rule
OPERATION_PRIORITY_OFFSET = 50

MAX_RESTRICTED_EXAMPLES = 3


def dominant_third_party_code(codes: Counter) -> Optional[str]:
    """Return the third-party code backing at least 70% of observations.

    Args:
        codes: Observed third-party code counts

    Returns:
        The dominant code, or None when codes are absent or inconsistent
    """
    total = sum(codes.values())
    if total == 0:
        return None
    code, count = codes.most_common(1)[0]
    if count >= total * THIRD_PARTY_CONSISTENCY:
        return code
    return None


def group_bank_accounts(
    patterns: dict[str, BankAccountPattern],
) -> dict[str, list[BankAccountPattern]]:
    """Group bank-account patterns by their primary counterpart account."""
    groups: dict[str, list[BankAccountPattern]] = {}
    for pattern in patterns.values():
        account = pattern.primary_account
        if account is None:
            continue
        groups.setdefault(account, []).append(pattern)
    return groups


class RuleSynthesizer:
    """Turns surviving candidates into draft rules."""

    def synthesize(
        self,
        entity_candidates: Sequence[EntityCandidate],
        operation_candidates: Sequence[OperationCandidate],
    ) -> list[AutomationRule]:
        """Create draft rules for all candidates.

        Entity candidates are expected in ranking order. Operation rules are
        numbered after every entity rule.

        Args:
            entity_candidates: Ranked entity candidates
            operation_candidates: Ranked operation candidates

        Returns:
            Draft rules in generation order
        """
        rules: list[AutomationRule] = []
        counter = 1

        for entity in entity_candidates:
            entity_rules = self.create_entity_rules(entity, counter)
            rules.extend(entity_rules)
            counter += len(entity_rules)

        counter += OPERATION_PRIORITY_OFFSET
        for operation in operation_candidates:
            rule = self.create_operation_rule(operation, counter)
            if rule is not None:
                rules.append(rule)
                counter += 1

        logger.debug("Synthesized %d draft rules", len(rules))
        return rules

    def create_entity_rules(self, entity: EntityCandidate, counter: int) -> list[AutomationRule]:
        """Create the rules of one entity.

        An entity whose bank accounts resolve to different primary
        counterpart accounts gets one restricted rule per account group;
        otherwise a single unrestricted rule is emitted.
        """
        if not entity.accounting_accounts:
            return []

        groups = group_bank_accounts(entity.bank_account_patterns)
        if len(entity.bank_account_patterns) > 1 and len(groups) > 1:
            rules = []
            for offset, (account, patterns) in enumerate(groups.items()):
                third_party_codes: Counter = Counter()
                examples: list[str] = []
                for pattern in patterns:
                    third_party_codes.update(pattern.third_party_codes)
                    for example in pattern.examples:
                        if len(examples) < MAX_RESTRICTED_EXAMPLES and example not in examples:
                            examples.append(example)

                rules.append(
                    AutomationRule(
                        priority=self._entity_priority(entity, counter + offset),
                        direction=entity.direction,
                        accounting_account=account,
                        third_party_code=dominant_third_party_code(third_party_codes),
                        rule_name=f"{entity.category.value}_{entity.name}_{account}",
                        keywords=(entity.name,),
                        keyword_matching=KeywordMatchingMode.ONE_OF,
                        restricted_bank_accounts=tuple(p.bank_account for p in patterns),
                        min_confidence=ENTITY_CONFIDENCE[entity.category],
                        coverage=sum(p.frequency for p in patterns),
                        examples=tuple(examples),
                        origin=RuleOrigin.ENTITY,
                        category=entity.category,
                    )
                )
            return rules

        account = entity.accounting_accounts.most_common(1)[0][0]
        return [
            AutomationRule(
                priority=self._entity_priority(entity, counter),
                direction=entity.direction,
                accounting_account=account,
                third_party_code=dominant_third_party_code(entity.third_party_codes),
                rule_name=f"{entity.category.value}_{entity.name}",
                keywords=(entity.name,),
                keyword_matching=KeywordMatchingMode.ONE_OF,
                min_confidence=ENTITY_CONFIDENCE[entity.category],
                coverage=entity.frequency,
                examples=tuple(entity.examples),
                origin=RuleOrigin.ENTITY,
                category=entity.category,
            )
        ]

    def create_operation_rule(
        self, operation: OperationCandidate, priority: int
    ) -> Optional[AutomationRule]:
        """Create the rule of one operation type, None without observed accounts."""
        if not operation.accounting_accounts or not operation.keywords:
            return None

        account = operation.accounting_accounts.most_common(1)[0][0]
        keyword = operation.keywords.most_common(1)[0][0]

        return AutomationRule(
            priority=priority,
            direction=operation.direction,
            accounting_account=account,
            third_party_code=dominant_third_party_code(operation.third_party_codes),
            rule_name=f"Operation_{operation.operation_type.value}_{account}",
            keywords=(keyword,),
            keyword_matching=KeywordMatchingMode.ONE_OF,
            min_confidence=OPERATION_CONFIDENCE[operation.operation_type],
            coverage=operation.frequency,
            examples=tuple(operation.examples),
            origin=RuleOrigin.OPERATION,
            operation_type=operation.operation_type,
        )

    @staticmethod
    def _entity_priority(entity: EntityCandidate, counter: int) -> int:
        return max(1, counter - entity.category.priority_weight)
