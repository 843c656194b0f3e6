import base64
import io

import qrcode
from PIL import Image

QR_IMAGE_SIZE = 200


def generate_qr_data_url(value: str, size: int = QR_IMAGE_SIZE) -> str:
    """Render ``value`` as a square PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=4)
    qr.add_data(value)
    qr.make(fit=True)

    image = qr.make_image(fill_color="black", back_color="white").get_image()
    image = image.convert("RGB").resize((size, size), Image.Resampling.NEAREST)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
