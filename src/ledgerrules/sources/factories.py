"""Entry source factory functions."""

from pathlib import Path

from ledgerrules.domain.entities import Direction
from ledgerrules.domain.errors import SourceError, unsupported_source_extension
from ledgerrules.sources.base import EntrySource
from ledgerrules.sources.json_file import JsonEntrySource


def create_entry_source(path: str | Path, direction: Direction) -> EntrySource:
    """Create an entry source for a file.

    Args:
        path: Path to the entry file
        direction: Side of the batch the file feeds

    Returns:
        EntrySource reading the file

    Raises:
        SourceError: If the file format is not supported
    """
    if Path(path).suffix.lower() != ".json":
        raise SourceError(unsupported_source_extension(str(path)))
    return JsonEntrySource(path, direction)
