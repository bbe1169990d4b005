from tokengate.models.refresh_token import RefreshToken
from tokengate.models.user import User, UserRole

__all__ = [
    "RefreshToken",
    "User",
    "UserRole",
]
