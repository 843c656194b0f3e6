from sqlalchemy.orm import Session

from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostAuthor, PostResponse


def create_post(db: Session, user_id: str, content: str, media_urls: list[str]) -> Post:
    post = Post(user_id=user_id, content=content or "", media_urls=list(media_urls))
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def list_posts_for_user(db: Session, user_id: str) -> list[tuple[Post, User | None]]:
    """Posts for a user, newest first, each paired with its author if one exists."""
    return (
        db.query(Post, User)
        .outerjoin(User, User.id == Post.user_id)
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc())
        .all()
    )


def delete_post(db: Session, post_id: str) -> int:
    deleted = db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    db.commit()
    return deleted


def to_post_response(post: Post, author: User | None) -> PostResponse:
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        content=post.content or "",
        image_url=list(post.media_urls or []),
        created_at=post.created_at,
        user=PostAuthor(
            user_id=author.id,
            username=author.username,
            profile_picture=author.profile_picture,
        ) if author else None,
    )
