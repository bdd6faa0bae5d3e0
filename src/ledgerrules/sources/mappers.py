"""Mapper functions to convert raw entry documents into domain entities.

Entry files use PascalCase property names, but any casing is accepted.
"""

from typing import Any, Mapping, Optional

from ledgerrules.domain.entities import CounterpartLine, Direction, TransactionEntry
from ledgerrules.domain.errors import ValidationError, invalid_direction
from ledgerrules.utils.amount_parser import parse_amount


def normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a mapping with lower-cased keys."""
    return {str(key).lower(): value for key, value in data.items()}


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(data: dict[str, Any], key: str) -> Optional[str]:
    return _text(data, key) or None


def _amount(data: dict[str, Any], key: str):
    try:
        return parse_amount(data.get(key))
    except ValueError as e:
        raise ValidationError(f"Invalid {key} amount: {e}") from e


def parse_direction(value: Any, default: Direction) -> Direction:
    """Parse a direction value, falling back to ``default`` when absent.

    Raises:
        ValidationError: If the value is present but unknown
    """
    if value is None or not str(value).strip():
        return default
    try:
        return Direction(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError(invalid_direction(str(value))) from e


def counterpart_from_dict(data: Mapping[str, Any]) -> CounterpartLine:
    """Convert a raw counterpart object to a CounterpartLine entity."""
    fields = normalize_keys(data)
    return CounterpartLine(
        accounting_account=_text(fields, "accountingaccount"),
        third_party_code=_optional_text(fields, "thirdpartycode"),
        label=_text(fields, "label"),
        debit=_amount(fields, "debit"),
        credit=_amount(fields, "credit"),
    )


def entry_from_dict(data: Mapping[str, Any], default_direction: Direction) -> TransactionEntry:
    """Convert a raw entry object to a TransactionEntry entity.

    Counterparts that are not objects are skipped. Lines without an
    accounting account are kept; the core ignores them.

    Args:
        data: Raw entry object
        default_direction: Direction used when the entry has none

    Returns:
        TransactionEntry entity

    Raises:
        ValidationError: If the entry is not an object or carries an
            unknown direction or an unparseable amount
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Entry must be an object, got {type(data).__name__}")

    fields = normalize_keys(data)
    counterparts = fields.get("counterparts") or []
    if not isinstance(counterparts, list):
        raise ValidationError("Entry counterparts must be a list")

    return TransactionEntry(
        label=_text(fields, "label"),
        direction=parse_direction(fields.get("direction"), default_direction),
        bank_account=_text(fields, "bankaccountname"),
        debit=_amount(fields, "debit"),
        credit=_amount(fields, "credit"),
        counterparts=tuple(
            counterpart_from_dict(line) for line in counterparts if isinstance(line, Mapping)
        ),
        accounting_account=_text(fields, "accountingaccount"),
        journal_code=_optional_text(fields, "journalcode"),
    )
