from fastapi.testclient import TestClient

from app.main import create_app
from app.models.user import User
from tests.helpers import login_user, register_user


def test_register_creates_user(client):
    response = register_user(client, dob="1990-05-01", gender="female")

    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}


def test_register_duplicate_email_or_username_is_rejected(client):
    assert register_user(client).status_code == 201

    same_both = register_user(client)
    same_email = register_user(client, username="other")
    same_username = register_user(client, email="other@x.com")

    for response in (same_both, same_email, same_username):
        assert response.status_code == 400
        assert response.json()["message"] == "Email or username already exists"


def test_register_missing_field_is_bad_request(client):
    response = client.post("/register", data={"email": "a@x.com", "username": "a"})

    assert response.status_code == 400


def test_password_is_stored_hashed(client, db_session):
    register_user(client, password="s3cret")

    user = db_session.query(User).filter(User.username == "a").one()
    assert user.password_hash != "s3cret"
    assert user.password_hash.startswith("$2")


def test_login_returns_identity_without_hash(client):
    register_user(client, password="s3cret")

    response = login_user(client, password="s3cret")

    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {"username", "profilePicture", "userId"}
    assert payload["username"] == "a"
    assert payload["profilePicture"] is None
    assert payload["userId"]


def test_login_failures_share_one_message(client):
    register_user(client, password="s3cret")

    wrong_password = login_user(client, password="nope")
    unknown_user = login_user(client, username="ghost", password="s3cret")

    assert wrong_password.status_code == 400
    assert unknown_user.status_code == 400
    assert wrong_password.json() == unknown_user.json() == {"message": "Invalid username or password"}


def test_register_with_profile_picture_serves_file(client):
    files = {"profilePicture": ("Avatar.PNG", b"png-bytes", "image/png")}
    assert register_user(client, files=files).status_code == 201

    picture = login_user(client).json()["profilePicture"]
    assert picture.startswith("/uploads/")
    assert picture.endswith(".png")

    served = client.get(picture)
    assert served.status_code == 200
    assert served.content == b"png-bytes"
    assert "max-age=86400" in served.headers["cache-control"]


def test_register_rejects_oversized_picture(client, app_settings):
    app_settings.MAX_UPLOAD_BYTES = 8
    files = {"profilePicture": ("big.jpg", b"0123456789", "image/jpeg")}

    response = register_user(client, files=files)

    assert response.status_code == 413
    assert login_user(client).status_code == 400


def test_register_accepts_json_body(client):
    response = client.post(
        "/register",
        json={"email": "j@x.com", "username": "json", "password": "p", "dob": "1990-05-01"},
    )

    assert response.status_code == 201
    assert login_user(client, username="json").status_code == 200


def test_register_json_missing_field_names_it(client):
    response = client.post("/register", json={"email": "j@x.com", "username": "json"})

    assert response.status_code == 400
    assert response.json() == {"message": "password: Field required"}


def test_register_malformed_json_is_bad_request(client):
    response = client.post(
        "/register",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400


def test_password_cost_follows_app_settings(app_settings):
    app_settings.BCRYPT_ROUNDS = 4

    with TestClient(create_app(app_settings)) as client:
        register_user(client, password="s3cret")
        session = client.app.state.database.SessionLocal()
        try:
            user = session.query(User).filter(User.username == "a").one()
        finally:
            session.close()
        login = login_user(client, password="s3cret")

    assert user.password_hash.split("$")[2] == "04"
    assert login.status_code == 200
