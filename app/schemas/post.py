from pydantic import BaseModel

from app.models.post import PostStatus


class PostCreate(BaseModel):
    title: str
    content: str
    status: PostStatus = PostStatus.DRAFT


class PostUpdate(BaseModel):
    title: str | None = None
    content: str | None = None
    status: PostStatus | None = None

    def changes(self) -> dict:
        """Only the fields that were actually supplied with a value."""
        return {
            key: value
            for key, value in self.model_dump().items()
            if value not in (None, "")
        }
