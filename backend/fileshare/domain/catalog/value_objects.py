"""
Metadata Catalog Value Objects

Immutable value objects for type safety and validation.
"""

import re
from dataclasses import dataclass

from ..errors import InvalidInputError

_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


@dataclass(frozen=True)
class ObjectId:
    """
    Value object representing a validated object identifier.

    Object ids are uuid4 values rendered as 32 lowercase hex characters.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not _OBJECT_ID_PATTERN.match(self.value):
            raise InvalidInputError(f"Invalid object id: {self.value!r}")

    def __str__(self) -> str:
        return self.value
