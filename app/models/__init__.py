from app.models.user import Role, User
from app.models.post import Post, PostStatus

__all__ = [
    "Role", "User",
    "Post", "PostStatus",
]
