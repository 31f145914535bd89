"""
NIP13 - Token Standard Package
"""

from .standard import NIP13
from . import commands

__all__ = ['NIP13', 'commands']
