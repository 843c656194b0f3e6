import base64
import io

import qrcode
from PIL import Image

from app.services.qr_service import generate_qr_data_url


def _decode(data_url):
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(data_url[len(prefix):])))


def test_generate_qr_returns_png_data_url(client):
    response = client.post("/generate-qr", json={"url": "https://example.com/portfolio/a"})

    assert response.status_code == 200
    image = _decode(response.json()["qrImageUrl"])
    assert image.format == "PNG"
    assert image.size == (200, 200)
    colors = {color for _, color in image.convert("L").getcolors()}
    assert colors == {0, 255}


def test_generate_qr_requires_url(client):
    missing = client.post("/generate-qr", json={})
    empty = client.post("/generate-qr", json={"url": ""})

    assert missing.status_code == 400
    assert empty.status_code == 400
    assert empty.json() == {"message": "URL is required"}


def test_qr_output_depends_on_input():
    assert generate_qr_data_url("https://a.example") != generate_qr_data_url("https://b.example")
    assert generate_qr_data_url("https://a.example") == generate_qr_data_url("https://a.example")


def test_qr_image_encodes_the_requested_url():
    url = "https://example.com/portfolio/a"
    expected = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=4)
    expected.add_data(url)
    expected.make(fit=True)
    matrix = expected.get_matrix()

    image = _decode(generate_qr_data_url(url)).convert("L")
    count = len(matrix)
    step = image.size[0] / count
    sampled = [
        [image.getpixel((int((col + 0.5) * step), int((row + 0.5) * step))) == 0 for col in range(count)]
        for row in range(count)
    ]

    assert sampled == matrix
