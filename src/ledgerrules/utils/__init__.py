"""Utility functions for ledgerrules."""

from ledgerrules.utils.amount_parser import parse_amount

__all__ = ["parse_amount"]
