"""Shared bookkeeping for entity and operation candidates."""

from typing import Union

from ledgerrules.domain.entities import (
    BankAccountPattern,
    EntityCandidate,
    OperationCandidate,
    TransactionEntry,
)

MAX_CANDIDATE_EXAMPLES = 5

Candidate = Union[EntityCandidate, OperationCandidate]


def record_observation(candidate: Candidate, entry: TransactionEntry) -> None:
    """Fold one matching entry into a candidate and its bank-account pattern.

    Counterpart lines without an accounting account are skipped; the entry
    still counts towards the candidate frequency.
    """
    candidate.frequency += 1
    _add_example(candidate.examples, entry.label)

    lines = entry.valid_counterparts
    for line in lines:
        candidate.accounting_accounts[line.accounting_account] += 1
        if line.third_party_code:
            candidate.third_party_codes[line.third_party_code] += 1

    if not entry.bank_account:
        return

    pattern = candidate.bank_account_patterns.get(entry.bank_account)
    if pattern is None:
        pattern = BankAccountPattern(bank_account=entry.bank_account)
        candidate.bank_account_patterns[entry.bank_account] = pattern

    pattern.frequency += 1
    _add_example(pattern.examples, entry.label)
    for line in lines:
        pattern.counterpart_accounts[line.accounting_account] += 1
        if line.third_party_code:
            pattern.third_party_codes[line.third_party_code] += 1


def _add_example(examples: list[str], label: str) -> None:
    if len(examples) < MAX_CANDIDATE_EXAMPLES and label not in examples:
        examples.append(label)
