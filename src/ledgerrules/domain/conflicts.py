"""Conflict resolution between validated rules sharing a keyword."""

from dataclasses import replace
from typing import Optional, Sequence

from ledgerrules.domain.entities import (
    AutomationRule,
    Direction,
    KeywordMatchingMode,
    RuleOrigin,
    RuleStatus,
)
from ledgerrules.domain.entity_extractor import OPERATION_MARKERS, extract_significant_words
from ledgerrules.domain.validation import RuleValidator
from ledgerrules.logging import get_logger

logger = get_logger(__name__)

# Entity rules are numbered first, so low priorities carry business meaning
BUSINESS_PRIORITY_CEILING = 20

MIN_CONFLICT_PRECISION = 0.85
MIN_DISCRIMINANT_LENGTH = 4
MAX_KEYWORDS = 3


def is_business_priority(rule: AutomationRule) -> bool:
    return rule.priority <= BUSINESS_PRIORITY_CEILING


def restrictions_disjoint(rule: AutomationRule, other: AutomationRule) -> bool:
    """True when both rules are bank-restricted and can never see the same entry."""
    if not rule.restricted_bank_accounts or not other.restricted_bank_accounts:
        return False
    return not set(rule.restricted_bank_accounts) & set(other.restricted_bank_accounts)


def find_discriminant_keyword(
    examples: Sequence[str],
    other_examples: Sequence[str],
    exclude: Sequence[str] = (),
) -> Optional[str]:
    """Find a word present in ``examples`` and absent from ``other_examples``.

    Operation markers and short words are never discriminants. Among the
    remaining words the longest, most frequent one wins.

    Args:
        examples: Labels of the rule to specialize
        other_examples: Labels of the competing rule
        exclude: Words already used as keywords

    Returns:
        The discriminant word or None
    """
    if not examples:
        return None

    excluded = {word.upper() for word in exclude}
    other_words: set[str] = set()
    for label in other_examples:
        other_words.update(extract_significant_words(label))

    candidates: list[str] = []
    for label in examples:
        for word in extract_significant_words(label):
            if (
                len(word) < MIN_DISCRIMINANT_LENGTH
                or word in OPERATION_MARKERS
                or word in excluded
                or word in other_words
                or word in candidates
            ):
                continue
            candidates.append(word)

    if not candidates:
        return None

    def specificity(word: str) -> float:
        hits = sum(1 for label in examples if word in label.upper())
        return len(word) * hits / len(examples)

    return max(candidates, key=specificity)


class ConflictResolver:
    """Resolves keyword collisions and produces the final rule ordering."""

    def __init__(self, validator: RuleValidator):
        """Initialize conflict resolver.

        Args:
            validator: Validator bound to the same corpus, used to re-measure
                specialized rules
        """
        self.validator = validator

    def resolve(self, rules: Sequence[AutomationRule]) -> list[AutomationRule]:
        """Resolve conflicts and return the final ordered rule set.

        Args:
            rules: Validated rules in generation order

        Returns:
            Rules sorted by ascending priority (stable)
        """
        groups: dict[tuple[str, Direction], list[AutomationRule]] = {}
        resolved: list[AutomationRule] = []

        for rule in rules:
            keyword = rule.primary_keyword.strip().upper()
            if not keyword:
                resolved.append(replace(rule, status=RuleStatus.KEPT))
                continue
            groups.setdefault((keyword, rule.direction), []).append(rule)

        for (keyword, direction), group in groups.items():
            if len(group) == 1:
                resolved.append(replace(group[0], status=RuleStatus.KEPT))
                continue
            logger.debug(
                "Resolving %d %s rules sharing keyword '%s'",
                len(group),
                direction.value,
                keyword,
            )
            resolved.extend(self.resolve_group(group))

        resolved.sort(key=lambda rule: rule.priority)
        return self.prune_shadowed_operations(resolved)

    def select_best(self, group: Sequence[AutomationRule]) -> AutomationRule:
        """Pick the winner of a group: business priority, then precision, then coverage."""
        return min(
            group,
            key=lambda rule: (not is_business_priority(rule), -rule.precision, -rule.coverage),
        )

    def resolve_group(self, group: Sequence[AutomationRule]) -> list[AutomationRule]:
        """Resolve one group of rules sharing a primary keyword."""
        best = self.select_best(group)
        kept = []

        if best.precision >= MIN_CONFLICT_PRECISION or is_business_priority(best):
            kept.append(replace(best, status=RuleStatus.KEPT))

        for rule in group:
            if rule is best:
                continue
            if rule.accounting_account == best.accounting_account:
                continue
            if rule.precision < MIN_CONFLICT_PRECISION:
                continue
            kept.append(self.demote(rule, best))

        return kept

    def demote(self, rule: AutomationRule, best: AutomationRule) -> AutomationRule:
        """Keep a discriminating loser behind the winner, specialized when possible."""
        priority = max(rule.priority, best.priority) + 1
        if not restrictions_disjoint(rule, best):
            specialized = self.specialize(rule, best)
            if specialized is not None:
                rule = specialized
        return replace(rule, priority=priority, status=RuleStatus.DEMOTED_KEPT)

    def specialize(
        self, rule: AutomationRule, best: AutomationRule
    ) -> Optional[AutomationRule]:
        """Add a discriminant keyword to a rule, if the result stays precise."""
        if len(rule.keywords) >= MAX_KEYWORDS:
            return None

        discriminant = find_discriminant_keyword(
            rule.examples, best.examples, exclude=rule.keywords
        )
        if discriminant is None:
            return None

        candidate = replace(
            rule,
            keywords=rule.keywords + (discriminant,),
            keyword_matching=KeywordMatchingMode.ALL,
            rule_name=f"Specialized_{rule.rule_name}_{discriminant}",
        )
        measured = self.validator.apply_measurement(candidate, self.validator.measure(candidate))
        if measured.coverage < 1 or measured.precision < MIN_CONFLICT_PRECISION:
            return None
        return measured

    def prune_shadowed_operations(
        self, rules: Sequence[AutomationRule]
    ) -> list[AutomationRule]:
        """Drop operation rules whose every match is claimed by earlier rules.

        Args:
            rules: Rules already sorted by priority

        Returns:
            Rules that can still fire, in the same order
        """
        claimed: set[int] = set()
        kept = []
        for rule in rules:
            matched = self.validator.measure(rule).matched_indices
            if rule.origin == RuleOrigin.OPERATION and matched and claimed.issuperset(matched):
                logger.debug("Dropped shadowed operation rule %s", rule.rule_name)
                continue
            kept.append(rule)
            claimed.update(matched)
        return kept
