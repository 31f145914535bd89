"""
NIP13 - Command Line Interface Package
"""

__version__ = "1.0.0"
