"""QR image rendering for ticket credentials.

The image only carries the credential string; it is rendered on demand and
never stored.
"""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def qr_png(payload: str, box_size: int = 8, border: int = 2) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def qr_data_url(payload: str, box_size: int = 8) -> str:
    """Render ``payload`` as a ``data:image/png;base64,...`` URL."""
    encoded = base64.b64encode(qr_png(payload, box_size=box_size)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
