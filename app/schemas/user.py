from app.schemas.base import CamelModel


class LoginRequest(CamelModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    username: str
    profile_picture: str | None
    user_id: str


class PublicProfile(CamelModel):
    user_id: str
    username: str
    profile_picture: str | None


class UserSearchResult(CamelModel):
    user_id: str
    username: str


class RegisterRequest(CamelModel):
    email: str
    username: str
    password: str
    dob: str | None = None
    gender: str | None = None
