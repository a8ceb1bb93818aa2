"""
Redis User Directory Implementation

Read model of the accounts the identity provider knows about.

Keys:
- ``user:{user_id}``     -> UserInfo JSON
- ``user_email:{email}`` -> user id (email lower-cased)
"""

import logging
from typing import Optional

from fileshare.domain.users import UserDirectory, UserInfo

from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class RedisUserDirectory(UserDirectory):
    """Redis-based implementation of UserDirectory."""

    def __init__(self, redis_repository: RedisRepository):
        self.redis_repo = redis_repository
        self.user_prefix = "user"
        self.email_prefix = "user_email"

    def get(self, user_id: str) -> Optional[UserInfo]:
        data = self.redis_repo.get_json(f"{self.user_prefix}:{user_id}")
        if data is None:
            return None
        try:
            return UserInfo.from_dict(data)
        except (KeyError, TypeError) as e:
            logger.warning(f"Error deserializing user {user_id}: {e}")
            return None

    def find_by_email(self, email: str) -> Optional[UserInfo]:
        if not email or not email.strip():
            return None
        data = self.redis_repo.get_json(f"{self.email_prefix}:{email.strip().lower()}")
        if data is None:
            return None
        return self.get(data["user_id"])

    def register(self, user: UserInfo) -> None:
        email = user.email.strip().lower()
        previous = self.get(user.user_id)

        self.redis_repo.set_json(
            f"{self.user_prefix}:{user.user_id}",
            UserInfo(user.user_id, email, user.name).to_dict(),
        )
        self.redis_repo.set_json(f"{self.email_prefix}:{email}", {"user_id": user.user_id})

        if previous is not None and previous.email != email:
            self.redis_repo.delete(f"{self.email_prefix}:{previous.email}")
