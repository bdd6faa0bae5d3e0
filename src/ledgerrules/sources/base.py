"""Abstract entry source interface."""

from abc import ABC, abstractmethod

from ledgerrules.domain.entities import Direction, TransactionEntry


class EntrySource(ABC):
    """Abstract source of transaction entries for one side of a batch."""

    def __init__(self, direction: Direction):
        """Initialize entry source.

        Args:
            direction: Side of the batch this source feeds; used when an
                entry does not state its own direction
        """
        self.direction = direction

    @abstractmethod
    def load_entries(self) -> list[TransactionEntry]:
        """Load all entries of the source."""
        pass
