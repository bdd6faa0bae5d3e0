"""Business entity extraction from transaction labels."""

import re
from typing import Iterable

from ledgerrules.domain.aggregation import record_observation
from ledgerrules.domain.entities import (
    BusinessCategory,
    Direction,
    EntityCandidate,
    Thresholds,
    TransactionEntry,
)
from ledgerrules.domain.thresholds import meets_threshold
from ledgerrules.logging import get_logger

logger = get_logger(__name__)

PUBLIC_INSTITUTIONS = ("APICIL", "CPAM", "URSSAF", "CAF", "POLE EMPLOI")
BANKS = ("BNP", "CREDIT AGRICOLE", "SOCIETE GENERALE", "CIC", "BANQUE POPULAIRE")

# Operation markers, short and long forms
OPERATION_MARKERS = frozenset(
    {
        "VIR", "VIREMENT", "CB", "CARTE", "PRLV", "PRELEVEMENT", "REMB",
        "REMBOURSEMENT", "SEPA", "FACT", "FACTURE", "RGLT", "REGLEMENT",
        "SOLDE", "ACOMPTE", "AVOIR",
    }
)

# Structural words that never identify a counterpart
GENERIC_WORDS = OPERATION_MARKERS | {"DATE", "NUM", "REF", "CIB"}

MIN_WORD_LENGTH = 3

_WORD_SPLIT = re.compile(r"\W+")
_NUMERIC = re.compile(r"^\d+$")


def is_generic_word(word: str) -> bool:
    """Check whether a token is a structural marker or a pure number."""
    return word.upper() in GENERIC_WORDS or bool(_NUMERIC.match(word))


def score_word(word: str) -> float:
    """Score a label token as an entity name.

    Longer tokens score higher, tokens written in capitals get a bonus and
    any digit is a strong penalty (references, dates, amounts).
    """
    score = float(len(word))
    if word.isupper():
        score += 2
    digits = sum(1 for char in word if char.isdigit())
    if digits:
        score -= 10 + digits
    return score


def extract_significant_words(label: str) -> list[str]:
    """Return distinct candidate words of a label, upper-cased, in label order."""
    if not label or not label.strip():
        return []

    words: list[str] = []
    for token in _WORD_SPLIT.split(label):
        if len(token) < MIN_WORD_LENGTH or is_generic_word(token):
            continue
        upper = token.upper()
        if upper not in words:
            words.append(upper)
    return words


def best_significant_word(label: str) -> str | None:
    """Return the single most discriminating word of a label."""
    if not label:
        return None

    best = None
    best_score = None
    seen: set[str] = set()
    for token in _WORD_SPLIT.split(label):
        if len(token) < MIN_WORD_LENGTH or is_generic_word(token):
            continue
        upper = token.upper()
        if upper in seen:
            continue
        seen.add(upper)
        score = score_word(token)
        if best_score is None or score > best_score:
            best, best_score = upper, score
    return best


class EntityExtractor:
    """Finds business entities in labels and aggregates them over a corpus."""

    def __init__(
        self,
        public_institutions: Iterable[str] = PUBLIC_INSTITUTIONS,
        banks: Iterable[str] = BANKS,
    ):
        """Initialize entity extractor.

        Args:
            public_institutions: Known public institution names
            banks: Known bank names
        """
        self.public_institutions = tuple(name.upper() for name in public_institutions)
        self.banks = tuple(name.upper() for name in banks)

    def extract_names(self, label: str) -> list[str]:
        """Extract candidate entity names from a label.

        Every known institution or bank found in the label is returned, in
        list order. When none is found, the best significant word is
        returned instead.

        Args:
            label: Transaction label

        Returns:
            List of entity names, possibly empty
        """
        if not label or not label.strip():
            return []

        upper = label.upper()
        names = [name for name in self.public_institutions if name in upper]
        names.extend(name for name in self.banks if name in upper)
        if names:
            return names

        word = best_significant_word(label)
        return [word] if word else []

    def categorize(self, name: str) -> BusinessCategory:
        upper = name.upper()
        if any(institution in upper for institution in self.public_institutions):
            return BusinessCategory.PUBLIC_INSTITUTION
        if any(bank in upper for bank in self.banks):
            return BusinessCategory.BANK
        return BusinessCategory.GENERIC

    def collect_candidates(
        self, entries: Iterable[TransactionEntry], thresholds: Thresholds
    ) -> list[EntityCandidate]:
        """Aggregate entities over the corpus and keep the frequent ones.

        Args:
            entries: Corpus entries
            thresholds: Active thresholds

        Returns:
            Candidates ordered by business priority, then frequency
        """
        candidates: dict[tuple[str, Direction], EntityCandidate] = {}

        for entry in entries:
            for name in self.extract_names(entry.label):
                key = (name, entry.direction)
                candidate = candidates.get(key)
                if candidate is None:
                    candidate = EntityCandidate(
                        name=name,
                        direction=entry.direction,
                        category=self.categorize(name),
                    )
                    candidates[key] = candidate
                record_observation(candidate, entry)

        kept = [
            candidate
            for candidate in candidates.values()
            if meets_threshold(candidate.frequency, thresholds.min_frequency)
        ]
        kept.sort(key=lambda c: (c.category.priority_weight, c.frequency), reverse=True)

        logger.debug(
            "Entity extraction: %d candidates, %d above min frequency %d",
            len(candidates),
            len(kept),
            thresholds.min_frequency,
        )
        return kept
