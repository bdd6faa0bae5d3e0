"""Corpus-wide dataset analysis."""

from collections import Counter
from typing import Sequence

from ledgerrules.domain.entities import DatasetAnalysis, TransactionEntry


def analyze_dataset(entries: Sequence[TransactionEntry]) -> DatasetAnalysis:
    """Compute the read-only statistics snapshot of a corpus in one pass.

    Args:
        entries: All corpus entries (debit and credit)

    Returns:
        DatasetAnalysis snapshot
    """
    labels: dict[str, None] = {}
    account_frequency: Counter = Counter()

    for entry in entries:
        labels.setdefault(entry.label, None)
        for line in entry.valid_counterparts:
            account_frequency[line.accounting_account] += 1

    return DatasetAnalysis(
        total_entries=len(entries),
        unique_labels=tuple(labels),
        unique_accounts=tuple(account_frequency),
        account_frequency=dict(account_frequency),
    )
