"""
NIP13 - Network Access

REST gateway access to ledger state.
"""
