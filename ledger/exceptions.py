"""
NIP13 - Ledger Exceptions

This module defines custom exceptions for ledger primitives: addresses,
identifiers and operation records.
"""


class LedgerError(Exception):
    """Base exception for ledger-related errors."""
    pass


class InvalidAddressError(LedgerError):
    """Exception raised for malformed addresses or network mismatches."""
    pass


class InvalidNamespaceError(LedgerError):
    """Exception raised for invalid namespace names or paths."""
    pass


class InvalidIdentifierError(LedgerError):
    """Exception raised for malformed mosaic or namespace identifiers."""
    pass
