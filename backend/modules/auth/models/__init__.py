from .user_models import AuthProvider, User, UserRole

__all__ = ["AuthProvider", "User", "UserRole"]
