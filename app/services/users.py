import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.models.post import Post
from app.models.user import Role, User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store over the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.AUTHOR,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def email_exists(self, email: str) -> bool:
        count = self.db.scalar(
            select(func.count()).select_from(User).where(User.email == email)
        )
        return bool(count)

    def list_all(self) -> list[User]:
        return (
            self.db.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def set_role(self, user: User, role: Role) -> User:
        user.role = role
        self.db.commit()
        return user

    def delete_with_posts(self, user: User) -> int:
        """Delete a user and every post they authored in a single transaction.

        Returns the number of posts removed.
        """
        user_id = user.id
        try:
            result = self.db.execute(delete(Post).where(Post.author_id == user_id))
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Deleted user %d and %d post(s)", user_id, result.rowcount)
        return result.rowcount
