"""Utility functions for partyplan."""

from partyplan.utils.date_parser import parse_date
from partyplan.utils.amount_parser import parse_amount
from partyplan.utils.payer_resolver import resolve_payer

__all__ = ["parse_date", "parse_amount", "resolve_payer"]
