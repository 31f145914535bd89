"""
NIP13 - Standards

Token standards and their command registries.
"""
