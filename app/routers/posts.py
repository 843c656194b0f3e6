from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_db
from app.schemas.post import CreatePostRequest, CreatePostResponse
from app.services import post_service
from app.services.media_storage import MediaStorage, get_media_storage
from app.utils.request_body import form_files, parse_body
from app.utils.response import create_response, handle_exception
from app.utils.uploads import store_uploads

router = APIRouter(tags=["Posts"])


@router.post("/create-post")
async def create_post(
    request: Request,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
    settings: Settings = Depends(get_settings),
):
    body, form = await parse_body(request, CreatePostRequest)
    try:
        uploads = form_files(form, "media")
        if len(uploads) > settings.MAX_POST_MEDIA:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"A post can have at most {settings.MAX_POST_MEDIA} media files",
            )

        image_urls = await store_uploads(storage, uploads, settings.MAX_UPLOAD_BYTES)
        post = post_service.create_post(db, body.user_id, body.content, image_urls)

        return create_response(
            CreatePostResponse(post_id=post.id, image_url=image_urls),
            message="Post created successfully",
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Error creating post")


@router.get("/user-posts/{user_id}")
def list_user_posts(user_id: str, db: Session = Depends(get_db)):
    try:
        rows = post_service.list_posts_for_user(db, user_id)
        payload = [post_service.to_post_response(post, author) for post, author in rows]
        return create_response(payload, status_code=status.HTTP_200_OK)
    except Exception as exc:
        return handle_exception(exc, "Error fetching posts")


@router.delete("/delete-post/{post_id}")
def delete_post(post_id: str, db: Session = Depends(get_db)):
    try:
        post_service.delete_post(db, post_id)
        return create_response(message="Post deleted successfully", status_code=status.HTTP_200_OK)
    except Exception as exc:
        return handle_exception(exc, "Error deleting post")
