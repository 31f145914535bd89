"""
NIP13 - Commands

Importing this package registers every NIP13 command with the standard.
"""

from .add_operator import AddOperator
from .create_token import CreateToken
from .mint_tokens import MintTokens
from .modify_metadata import ModifyMetadata

__all__ = ['AddOperator', 'CreateToken', 'MintTokens', 'ModifyMetadata']
