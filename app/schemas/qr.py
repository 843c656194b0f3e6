from app.schemas.base import CamelModel


class QrRequest(CamelModel):
    url: str | None = None


class QrResponse(CamelModel):
    qr_image_url: str
