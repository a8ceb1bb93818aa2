"""
Sharing Value Objects

Immutable value objects for share-link tokens.
"""

import secrets
import string
from dataclasses import dataclass

from ..errors import InvalidInputError

# 20 random bytes -> 40 hex characters, 160 bits of entropy
TOKEN_BYTES = 20


@dataclass(frozen=True)
class ShareToken:
    """
    Value object representing a share-link token.

    Tokens are generated from the ``secrets`` module and encoded as
    lowercase hex. Validation only rejects values that could never have been
    issued (blank or non-hex); whether a token resolves is the ledger's call.
    """

    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise InvalidInputError("Invalid share token: must be a non-empty hex string")

    def _is_valid(self) -> bool:
        if not self.value or not isinstance(self.value, str):
            return False
        return all(c in string.hexdigits for c in self.value)

    @classmethod
    def generate(cls) -> "ShareToken":
        """
        Generate a new cryptographically secure token.

        Returns:
            New ShareToken with 160 bits of entropy
        """
        return cls(secrets.token_hex(TOKEN_BYTES))

    def __str__(self) -> str:
        return self.value
