from datetime import datetime

from app.schemas.base import CamelModel


class PostAuthor(CamelModel):
    user_id: str
    username: str
    profile_picture: str | None


class PostResponse(CamelModel):
    id: str
    user_id: str
    content: str
    image_url: list[str]
    created_at: datetime
    user: PostAuthor | None = None


class CreatePostResponse(CamelModel):
    post_id: str
    image_url: list[str]


class CreatePostRequest(CamelModel):
    user_id: str
    content: str = ""
