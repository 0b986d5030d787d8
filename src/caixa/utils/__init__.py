"""Utility functions for caixa."""

from caixa.utils.dates import parse_date, parse_day, format_day, today
from caixa.utils.amount_parser import parse_amount, format_brl

__all__ = ["parse_date", "parse_day", "format_day", "today", "parse_amount", "format_brl"]
