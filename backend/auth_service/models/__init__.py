from auth_service.models.user import UserAccount

__all__ = [
    "UserAccount",
]
