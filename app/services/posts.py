from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.post import Post, PostStatus


class PostStore:
    """Content store over the ``blog_posts`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        title: str,
        content: str,
        author_id: int,
        status: PostStatus = PostStatus.DRAFT,
    ) -> Post:
        post = Post(title=title, content=content, author_id=author_id, status=status)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        return post

    def find_all(
        self,
        status: PostStatus | None = None,
        author_id: int | None = None,
    ) -> list[Post]:
        query = self.db.query(Post).options(joinedload(Post.author))
        if status:
            query = query.filter(Post.status == status)
        if author_id:
            query = query.filter(Post.author_id == author_id)
        return query.order_by(Post.created_at.desc(), Post.id.desc()).all()

    def find_by_id(self, post_id: int) -> Post | None:
        return (
            self.db.query(Post)
            .options(joinedload(Post.author))
            .filter(Post.id == post_id)
            .first()
        )

    def update(self, post: Post, changes: dict) -> Post | None:
        """Apply a partial update. Returns None when there is nothing to change."""
        if not changes:
            return None
        for field in ("title", "content", "status"):
            if field in changes:
                setattr(post, field, changes[field])
        post.updated_at = func.now()
        self.db.commit()
        self.db.refresh(post)
        return post

    def publish(self, post: Post) -> Post:
        return self.update(post, {"status": PostStatus.PUBLISHED})

    def delete(self, post: Post) -> None:
        self.db.delete(post)
        self.db.commit()
