"""JSON entry file source."""

import json
from pathlib import Path

from ledgerrules.domain.entities import Direction, TransactionEntry
from ledgerrules.domain.errors import (
    SourceError,
    ValidationError,
    invalid_source_document,
    source_not_found,
)
from ledgerrules.logging import get_logger
from ledgerrules.sources.base import EntrySource
from ledgerrules.sources.mappers import entry_from_dict, normalize_keys

logger = get_logger(__name__)


class JsonEntrySource(EntrySource):
    """Reads a ``{"Entries": [...]}`` document from disk."""

    def __init__(self, path: str | Path, direction: Direction):
        """Initialize JSON entry source.

        Args:
            path: Path to the JSON entry file
            direction: Side of the batch this file feeds
        """
        super().__init__(direction)
        self.path = Path(path)

    def load_entries(self) -> list[TransactionEntry]:
        """Load and map every entry of the file.

        Returns:
            List of TransactionEntry entities in file order

        Raises:
            SourceError: If the file is missing or is not a valid entry document
            ValidationError: If an entry cannot be mapped
        """
        if not self.path.exists():
            raise SourceError(source_not_found(str(self.path)))

        try:
            with open(self.path, "r", encoding="utf-8-sig") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceError(invalid_source_document(str(self.path), str(e))) from e

        if not isinstance(document, dict):
            raise SourceError(
                invalid_source_document(str(self.path), "expected a JSON object")
            )

        raw_entries = normalize_keys(document).get("entries")
        if not isinstance(raw_entries, list):
            raise SourceError(
                invalid_source_document(str(self.path), "missing 'Entries' array")
            )

        entries = []
        for position, raw in enumerate(raw_entries, start=1):
            try:
                entries.append(entry_from_dict(raw, self.direction))
            except ValidationError as e:
                raise ValidationError(f"{self.path}, entry {position}: {e}") from e

        logger.debug("Loaded %d %s entries from %s", len(entries), self.direction.value, self.path)
        return entries
