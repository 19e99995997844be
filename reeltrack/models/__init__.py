"""Database models"""

from .entry import Entry
from .user import User

__all__ = ["User", "Entry"]
