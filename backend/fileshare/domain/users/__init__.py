"""
User Directory Domain
"""

from .entities import UserInfo
from .repositories import UserDirectory

__all__ = ["UserDirectory", "UserInfo"]
