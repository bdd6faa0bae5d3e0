"""Rule match predicate and corpus replay."""

from typing import Optional, Sequence

from ledgerrules.domain.entities import (
    AutomationRule,
    KeywordMatchingMode,
    RuleMeasurement,
    TransactionEntry,
)

MAX_RULE_EXAMPLES = 5


def normalize_label(label: str) -> str:
    """Normalize a label for case-insensitive keyword matching."""
    return (label or "").upper()


def keywords_match(
    normalized_label: str, keywords: Sequence[str], mode: KeywordMatchingMode
) -> bool:
    """Check keywords against an already normalized label."""
    present = [
        keyword.upper() in normalized_label
        for keyword in keywords
        if keyword and keyword.strip()
    ]
    if not present:
        return False
    if mode == KeywordMatchingMode.ALL:
        return all(present)
    return any(present)


def rule_matches(
    rule: AutomationRule,
    entry: TransactionEntry,
    normalized_label: Optional[str] = None,
) -> bool:
    """Check whether a rule applies to an entry.

    A rule applies when the direction matches, the entry's bank account is
    allowed by the restriction list (if any) and the keywords match the
    label according to the rule's matching mode.
    """
    if entry.direction != rule.direction:
        return False
    if rule.restricted_bank_accounts and entry.bank_account not in rule.restricted_bank_accounts:
        return False
    if normalized_label is None:
        normalized_label = normalize_label(entry.label)
    return keywords_match(normalized_label, rule.keywords, rule.keyword_matching)


def replay_rule(
    rule: AutomationRule,
    entries: Sequence[TransactionEntry],
    normalized_labels: Optional[Sequence[str]] = None,
) -> RuleMeasurement:
    """Replay a rule over the corpus in a single pass.

    Args:
        rule: Rule to replay
        entries: Corpus entries
        normalized_labels: Pre-normalized labels aligned with entries

    Returns:
        Matched entry indices, number of correct matches and examples
    """
    if normalized_labels is None:
        normalized_labels = [normalize_label(entry.label) for entry in entries]

    matched: list[int] = []
    correct = 0
    examples: list[str] = []

    for index, entry in enumerate(entries):
        if not rule_matches(rule, entry, normalized_labels[index]):
            continue
        matched.append(index)
        if rule.accounting_account in entry.counterpart_accounts:
            correct += 1
        if len(examples) < MAX_RULE_EXAMPLES and entry.label not in examples:
            examples.append(entry.label)

    return RuleMeasurement(
        matched_indices=tuple(matched),
        correct_matches=correct,
        examples=tuple(examples),
    )
