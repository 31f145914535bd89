"""
Cryptographic Exceptions for NIP13

This module defines custom exceptions for key handling and derivation.
"""


class CryptoError(Exception):
    """Base exception for all cryptographic errors."""
    pass


class InvalidKeyError(CryptoError):
    """Raised when a key is invalid or malformed."""
    pass


class DerivationError(CryptoError):
    """Raised when key derivation fails."""
    pass
