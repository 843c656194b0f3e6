def register_user(client, email="a@x.com", username="a", password="p", files=None, **extra):
    data = {"email": email, "username": username, "password": password, **extra}
    return client.post("/register", data=data, files=files)


def login_user(client, username="a", password="p"):
    return client.post("/login", json={"username": username, "password": password})


class RecordingStorage:
    """Media storage double that remembers what it was asked to store."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.stored: list[tuple[str, bytes]] = []

    def store(self, data, original_filename, content_type=None):
        if self.fail_on and original_filename == self.fail_on:
            raise OSError(f"disk full while writing {original_filename}")
        self.stored.append((original_filename, data))
        return f"https://cdn.test/{original_filename}"
