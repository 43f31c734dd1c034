"""Command line interface for ledgerprune."""
