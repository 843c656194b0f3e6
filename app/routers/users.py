from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_db
from app.schemas.user import PublicProfile, UserSearchResult
from app.services import user_service
from app.services.media_storage import MediaStorage, get_media_storage
from app.utils.response import create_response, handle_exception
from app.utils.uploads import has_file, store_upload

router = APIRouter(tags=["Users"])


@router.post("/update-profile-picture")
async def update_profile_picture(
    user_id: str = Form(..., alias="userId"),
    profile_picture: UploadFile | None = File(None, alias="profilePicture"),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
    settings: Settings = Depends(get_settings),
):
    try:
        user = user_service.get_user(db, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=user_service.USER_NOT_FOUND_MESSAGE,
            )
        if not has_file(profile_picture):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Profile picture file is required",
            )

        picture_url = await store_upload(storage, profile_picture, settings.MAX_UPLOAD_BYTES)
        user_service.set_profile_picture(db, user, picture_url)

        return create_response(
            {"profilePicture": picture_url},
            message="Profile picture updated successfully",
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Error updating profile picture")


@router.get("/search-users")
def search_users(
    query: str | None = Query(None),
    db: Session = Depends(get_db),
):
    try:
        if not query or not query.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Query parameter is required",
            )

        users = user_service.search_users(db, query.strip())
        payload = [UserSearchResult(user_id=user.id, username=user.username) for user in users]
        return create_response(payload, status_code=status.HTTP_200_OK)
    except Exception as exc:
        return handle_exception(exc, "Error searching users")


@router.get("/users/{user_id}")
def get_user_info(user_id: str, db: Session = Depends(get_db)):
    try:
        user = user_service.get_user(db, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=user_service.USER_NOT_FOUND_MESSAGE,
            )

        return create_response(
            PublicProfile(
                user_id=user.id,
                username=user.username,
                profile_picture=user.profile_picture,
            ),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Error fetching user info")
