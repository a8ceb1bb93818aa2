"""
User Directory Entities
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UserInfo:
    """Display information for a known identity."""

    user_id: str
    email: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "email": self.email, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInfo":
        return cls(user_id=data["user_id"], email=data["email"], name=data.get("name"))
