from .share import PublicShare
from .user import User

__all__ = ["PublicShare", "User"]
