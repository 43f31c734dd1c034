"""Utility functions for ledgerprune."""

from ledgerprune.utils.date_parser import parse_cutoff_date

__all__ = ["parse_cutoff_date"]
