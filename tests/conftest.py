"""Shared pytest fixtures for ledgerrules tests."""

from decimal import Decimal
from pathlib import Path

import pytest

from ledgerrules.domain.entities import (
    CounterpartLine,
    Direction,
    RuleGenerationRequest,
    TransactionEntry,
)
from ledgerrules.domain.generator import RuleGenerationService
from ledgerrules.domain.thresholds import FixedThresholdPolicy


@pytest.fixture
def make_entry():
    """Return a factory building single-counterpart transaction entries."""

    def _make_entry(
        label,
        account="",
        direction=Direction.DEBIT,
        bank_account="512000",
        third_party_code=None,
        amount="100.00",
    ):
        counterparts = ()
        if account is not None:
            counterparts = (
                CounterpartLine(
                    accounting_account=account,
                    third_party_code=third_party_code,
                    label=label,
                    debit=Decimal(amount) if direction == Direction.DEBIT else Decimal("0"),
                    credit=Decimal(amount) if direction == Direction.CREDIT else Decimal("0"),
                ),
            )
        return TransactionEntry(
            label=label,
            direction=direction,
            bank_account=bank_account,
            debit=Decimal(amount) if direction == Direction.CREDIT else Decimal("0"),
            credit=Decimal(amount) if direction == Direction.DEBIT else Decimal("0"),
            counterparts=counterparts,
        )

    return _make_entry


@pytest.fixture
def make_request():
    """Return a factory splitting entries into a request by direction."""

    def _make_request(entries):
        return RuleGenerationRequest(
            debit_entries=tuple(e for e in entries if e.direction == Direction.DEBIT),
            credit_entries=tuple(e for e in entries if e.direction == Direction.CREDIT),
        )

    return _make_request


@pytest.fixture
def permissive_service():
    """Create a RuleGenerationService whose thresholds are forced to 1."""
    return RuleGenerationService(threshold_policy=FixedThresholdPolicy(1, 1))


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def debit_file(fixtures_dir):
    return fixtures_dir / "debit_entries.json"


@pytest.fixture
def credit_file(fixtures_dir):
    return fixtures_dir / "credit_entries.json"
