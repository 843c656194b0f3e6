from fastapi import APIRouter, HTTPException, status

from app.schemas.qr import QrRequest, QrResponse
from app.services.qr_service import generate_qr_data_url
from app.utils.response import create_response, handle_exception

router = APIRouter(tags=["QR"])


@router.post("/generate-qr")
def generate_qr(body: QrRequest):
    try:
        if not body.url or not body.url.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="URL is required")

        return create_response(
            QrResponse(qr_image_url=generate_qr_data_url(body.url)),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Error generating QR code")
