"""
NIP13 - Helpers

Stateless construction functions composed by the NIP13 commands:
account coercion, token account and nonce derivation, and ledger
operation builders. Import from the submodules.
"""
