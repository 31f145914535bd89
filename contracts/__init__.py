"""
NIP13 - Contracts

Execution context, command and standard abstractions, the ledger reader
interface and the command error taxonomy. Import from the submodules.
"""
