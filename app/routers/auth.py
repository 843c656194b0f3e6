from fastapi import APIRouter, Depends, HTTPException, Request, status
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_db
from app.schemas.user import LoginRequest, LoginResponse, RegisterRequest
from app.services import user_service
from app.services.auth_service import get_password_context
from app.services.media_storage import MediaStorage, get_media_storage
from app.utils.request_body import form_files, parse_body
from app.utils.response import create_response, handle_exception
from app.utils.uploads import store_upload

router = APIRouter(tags=["Auth"])


@router.post("/register")
async def register(
    request: Request,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
    settings: Settings = Depends(get_settings),
    pwd_context: CryptContext = Depends(get_password_context),
):
    # JSON when no picture is attached, multipart otherwise
    body, form = await parse_body(request, RegisterRequest)
    try:
        if user_service.find_conflicting_user(db, body.email, body.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=user_service.DUPLICATE_USER_MESSAGE,
            )

        picture_url = None
        pictures = form_files(form, "profilePicture")
        if pictures:
            picture_url = await store_upload(storage, pictures[0], settings.MAX_UPLOAD_BYTES)

        try:
            user_service.create_user(
                db,
                pwd_context,
                email=body.email,
                username=body.username,
                password=body.password,
                dob=body.dob,
                gender=body.gender,
                profile_picture=picture_url,
            )
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=user_service.DUPLICATE_USER_MESSAGE,
            ) from exc

        return create_response(
            message="User registered successfully",
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Error registering user")


@router.post("/login")
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    pwd_context: CryptContext = Depends(get_password_context),
):
    try:
        user = user_service.authenticate(db, pwd_context, body.username, body.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=user_service.INVALID_LOGIN_MESSAGE,
            )

        return create_response(
            LoginResponse(
                username=user.username,
                profile_picture=user.profile_picture,
                user_id=user.id,
            ),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Error logging in user")
