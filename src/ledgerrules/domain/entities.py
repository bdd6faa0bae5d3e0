"""Domain model entities for ledgerrules.

These are pure data classes representing the bookkeeping corpus and the
rules mined from it, independent of the file formats they are loaded from
or rendered to.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Flow direction of a bank movement."""

    DEBIT = "debit"
    CREDIT = "credit"


class KeywordMatchingMode(str, Enum):
    """How the keywords of a rule are combined."""

    ALL = "all"
    ONE_OF = "oneof"


class BusinessCategory(str, Enum):
    """Business category of an extracted entity."""

    PUBLIC_INSTITUTION = "PublicInstitution"
    BANK = "Bank"
    GENERIC = "Generic"

    @property
    def priority_weight(self) -> int:
        """Ranking weight, higher is more trusted."""
        return _CATEGORY_WEIGHTS[self]


_CATEGORY_WEIGHTS = {
    BusinessCategory.PUBLIC_INSTITUTION: 3,
    BusinessCategory.BANK: 2,
    BusinessCategory.GENERIC: 1,
}


class OperationType(str, Enum):
    """Standardized operation markers found in bank labels."""

    BANK_FEES = "BankFees"
    CREDIT_CARD = "CreditCard"
    TRANSFER = "Transfer"
    DIRECT_DEBIT = "DirectDebit"


class RuleOrigin(str, Enum):
    """Which candidate family produced a rule."""

    ENTITY = "Entity"
    OPERATION = "Operation"


class RuleStatus(str, Enum):
    """Lifecycle state of a rule."""

    DRAFT = "Draft"
    VALIDATED = "Validated"
    KEPT = "Kept"
    DEMOTED_KEPT = "DemotedKept"


@dataclass(frozen=True)
class CounterpartLine:
    """One accounting split of a transaction entry."""

    accounting_account: str
    third_party_code: Optional[str] = None
    label: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")

    @property
    def is_valid(self) -> bool:
        """A line without an accounting account cannot back any rule."""
        return bool(self.accounting_account and self.accounting_account.strip())


@dataclass(frozen=True)
class TransactionEntry:
    """One bookkeeping movement read from a bank statement."""

    label: str
    direction: Direction
    bank_account: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    counterparts: tuple[CounterpartLine, ...] = ()
    accounting_account: str = ""
    journal_code: Optional[str] = None

    @property
    def valid_counterparts(self) -> tuple[CounterpartLine, ...]:
        return tuple(line for line in self.counterparts if line.is_valid)

    @property
    def counterpart_accounts(self) -> set[str]:
        return {line.accounting_account for line in self.valid_counterparts}


@dataclass
class BankAccountPattern:
    """Observations of a candidate scoped to one bank account."""

    bank_account: str
    frequency: int = 0
    counterpart_accounts: Counter = field(default_factory=Counter)
    third_party_codes: Counter = field(default_factory=Counter)
    examples: list[str] = field(default_factory=list)

    @property
    def primary_account(self) -> Optional[str]:
        if not self.counterpart_accounts:
            return None
        return self.counterpart_accounts.most_common(1)[0][0]


@dataclass
class EntityCandidate:
    """In-flight aggregation of one entity name for one direction."""

    name: str
    direction: Direction
    category: BusinessCategory
    frequency: int = 0
    accounting_accounts: Counter = field(default_factory=Counter)
    examples: list[str] = field(default_factory=list)
    third_party_codes: Counter = field(default_factory=Counter)
    bank_account_patterns: dict[str, BankAccountPattern] = field(default_factory=dict)


@dataclass
class OperationCandidate:
    """In-flight aggregation of one operation type for one direction."""

    operation_type: OperationType
    direction: Direction
    frequency: int = 0
    accounting_accounts: Counter = field(default_factory=Counter)
    keywords: Counter = field(default_factory=Counter)
    examples: list[str] = field(default_factory=list)
    third_party_codes: Counter = field(default_factory=Counter)
    bank_account_patterns: dict[str, BankAccountPattern] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetAnalysis:
    """Corpus-wide read-only snapshot."""

    total_entries: int
    unique_labels: tuple[str, ...]
    unique_accounts: tuple[str, ...]
    account_frequency: dict[str, int]


@dataclass(frozen=True)
class Thresholds:
    """Minimum bars a candidate pattern must meet to become a rule."""

    min_frequency: int
    min_coverage: int


@dataclass(frozen=True)
class AutomationRule:
    """A classification rule mapping label keywords to an account."""

    priority: int
    direction: Direction
    accounting_account: str
    rule_name: str
    keywords: tuple[str, ...]
    origin: RuleOrigin
    keyword_matching: KeywordMatchingMode = KeywordMatchingMode.ONE_OF
    third_party_code: Optional[str] = None
    restricted_bank_accounts: tuple[str, ...] = ()
    min_confidence: float = 0.0
    coverage: int = 0
    precision: float = 0.0
    examples: tuple[str, ...] = ()
    category: Optional[BusinessCategory] = None
    operation_type: Optional[OperationType] = None
    status: RuleStatus = RuleStatus.DRAFT

    def __post_init__(self):
        if not 1 <= len(self.keywords) <= 3:
            raise ValueError(
                f"Rule '{self.rule_name}' needs one to three keywords, got {len(self.keywords)}"
            )

    @property
    def primary_keyword(self) -> str:
        return self.keywords[0]

    @property
    def keyword1(self) -> Optional[str]:
        return self.keywords[0] if len(self.keywords) > 0 else None

    @property
    def keyword2(self) -> Optional[str]:
        return self.keywords[1] if len(self.keywords) > 1 else None

    @property
    def keyword3(self) -> Optional[str]:
        return self.keywords[2] if len(self.keywords) > 2 else None

    @property
    def restricted_bank_accounts_text(self) -> Optional[str]:
        """Comma-joined restriction list, None when unrestricted."""
        if not self.restricted_bank_accounts:
            return None
        return ",".join(self.restricted_bank_accounts)


@dataclass(frozen=True)
class RuleMeasurement:
    """Result of replaying one rule over the corpus."""

    matched_indices: tuple[int, ...]
    correct_matches: int
    examples: tuple[str, ...] = ()

    @property
    def coverage(self) -> int:
        return len(self.matched_indices)

    @property
    def precision(self) -> float:
        if not self.matched_indices:
            return 0.0
        return self.correct_matches / len(self.matched_indices)


@dataclass(frozen=True)
class RuleSetMetrics:
    """Corpus-wide quality of a whole rule set."""

    total_entries: int
    total_matches: int
    correct_matches: int
    matched_entries: int

    @property
    def precision(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return self.correct_matches / self.total_matches

    @property
    def coverage_rate(self) -> float:
        if self.total_entries == 0:
            return 0.0
        return self.matched_entries / self.total_entries


@dataclass(frozen=True)
class RuleGenerationRequest:
    """Both entry collections of one batch."""

    debit_entries: tuple[TransactionEntry, ...] = ()
    credit_entries: tuple[TransactionEntry, ...] = ()

    @property
    def all_entries(self) -> tuple[TransactionEntry, ...]:
        return tuple(self.debit_entries) + tuple(self.credit_entries)


@dataclass(frozen=True)
class GenerationStatistics:
    """Summary of one generation run."""

    total_rules: int
    coverage_rate: float
    average_precision: float
    average_confidence: float
    debit_rules: int
    credit_rules: int
    debit_entries_count: int
    credit_entries_count: int
    public_institution_rules: int
    bank_rules: int
    generic_rules: int
    operation_rules: int


@dataclass(frozen=True)
class RuleGenerationResult:
    """Everything a generation run produces."""

    rules: tuple[AutomationRule, ...]
    metrics: RuleSetMetrics
    analysis: DatasetAnalysis
    statistics: GenerationStatistics
