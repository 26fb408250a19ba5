"""QR code generation for user detail links."""

import base64
import io

import qrcode


def scan_url(origin, user_id):
    """Link encoded into a user's QR code; ``scanned=true`` triggers the view counter."""
    return f"{origin.rstrip('/')}/user/{user_id}?scanned=true"


def encode(text):
    """Render ``text`` as a QR code and return it as a PNG data URI."""
    img = qrcode.make(text)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
