"""Detection of standardized operation markers in transaction labels.

Operations (bank fees, card payments, transfers, direct debits) are
recognized independently of the counterparty. The accounting account of an
operation rule is never derived from the marker itself: it always comes from
the counterparts observed on the matching entries.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from ledgerrules.domain.aggregation import record_observation
from ledgerrules.domain.entities import (
    Direction,
    OperationCandidate,
    OperationType,
    Thresholds,
    TransactionEntry,
)
from ledgerrules.domain.thresholds import meets_threshold
from ledgerrules.logging import get_logger

logger = get_logger(__name__)

BANK_FEES_PATTERN = re.compile(
    r"(?P<term>FRAIS).*BANC|\b(?P<other>COMMISSION|COTISATION|AGIOS|ABONNEMENT)S?\b",
    re.IGNORECASE,
)
CREDIT_CARD_PATTERN = re.compile(r"\bCB\s+(?P<merchant>.+?)(?:\s+FACT\s+\d+.*)?$", re.IGNORECASE)
TRANSFER_PATTERN = re.compile(r"\bVIR(?:EMENT)?\s+(?P<beneficiary>.+)", re.IGNORECASE)
DIRECT_DEBIT_PATTERN = re.compile(r"\b(?P<marker>PRLV|PRELEVEMENT)\b", re.IGNORECASE)


@dataclass(frozen=True)
class OperationPattern:
    """One operation marker found in a label."""

    operation_type: OperationType
    keyword: str
    detail: str = ""


def detect_operations(label: str) -> list[OperationPattern]:
    """Detect every operation marker in a label.

    Detections are independent: a label can be both a transfer and a
    bank fee.

    Args:
        label: Transaction label

    Returns:
        Detected patterns in a fixed type order
    """
    if not label or not label.strip():
        return []

    patterns = []

    match = BANK_FEES_PATTERN.search(label)
    if match:
        term = match.group("term") or match.group("other")
        patterns.append(OperationPattern(OperationType.BANK_FEES, term.upper()))

    match = CREDIT_CARD_PATTERN.search(label)
    if match:
        patterns.append(
            OperationPattern(OperationType.CREDIT_CARD, "CB", match.group("merchant").strip())
        )

    match = TRANSFER_PATTERN.search(label)
    if match:
        patterns.append(
            OperationPattern(OperationType.TRANSFER, "VIR", match.group("beneficiary").strip())
        )

    match = DIRECT_DEBIT_PATTERN.search(label)
    if match:
        patterns.append(OperationPattern(OperationType.DIRECT_DEBIT, match.group("marker").upper()))

    return patterns


class OperationDetector:
    """Aggregates operation markers over a corpus."""

    def collect_candidates(
        self, entries: Iterable[TransactionEntry], thresholds: Thresholds
    ) -> list[OperationCandidate]:
        """Aggregate operation patterns and keep the frequent ones.

        Args:
            entries: Corpus entries
            thresholds: Active thresholds

        Returns:
            Candidates ordered by descending frequency
        """
        candidates: dict[tuple[OperationType, Direction], OperationCandidate] = {}

        for entry in entries:
            for pattern in detect_operations(entry.label):
                key = (pattern.operation_type, entry.direction)
                candidate = candidates.get(key)
                if candidate is None:
                    candidate = OperationCandidate(
                        operation_type=pattern.operation_type,
                        direction=entry.direction,
                    )
                    candidates[key] = candidate
                candidate.keywords[pattern.keyword] += 1
                record_observation(candidate, entry)

        kept = [
            candidate
            for candidate in candidates.values()
            if meets_threshold(candidate.frequency, thresholds.min_frequency)
        ]
        kept.sort(key=lambda c: c.frequency, reverse=True)

        logger.debug(
            "Operation detection: %d candidates, %d above min frequency %d",
            len(candidates),
            len(kept),
            thresholds.min_frequency,
        )
        return kept
