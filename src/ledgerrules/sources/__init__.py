"""Entry sources for ledgerrules."""

from ledgerrules.sources.base import EntrySource
from ledgerrules.sources.factories import create_entry_source

__all__ = ["EntrySource", "create_entry_source"]
