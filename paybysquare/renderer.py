"""QR image rendering for PAY by square payloads."""
from __future__ import annotations

import base64
import io
from typing import Any

import qrcode
import qrcode.image.svg
from PIL import Image

from .config import settings

FORMAT_PNG = "png"
FORMAT_SVG = "svg"
SUPPORTED_FORMATS = (FORMAT_PNG, FORMAT_SVG)
MEDIA_TYPES = {FORMAT_PNG: "image/png", FORMAT_SVG: "image/svg+xml"}


def _build_qr(data: str, box_size: int | None = None, border: int | None = None) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=box_size or settings.qr_box_size,
        border=settings.qr_border if border is None else border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def generate_qr_image(data: str, box_size: int | None = None, border: int | None = None) -> Image.Image:
    """Generate a plain black-on-white QR image."""

    qr = _build_qr(data, box_size=box_size, border=border)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def qr_image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_png(data: str, box_size: int | None = None, border: int | None = None) -> bytes:
    return qr_image_to_png_bytes(generate_qr_image(data, box_size=box_size, border=border))


def render_svg(data: str, box_size: int | None = None, border: int | None = None) -> bytes:
    qr = _build_qr(data, box_size=box_size, border=border)
    image = qr.make_image(image_factory=qrcode.image.svg.SvgPathImage)
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()


def render(data: str, fmt: str = FORMAT_PNG, box_size: int | None = None, border: int | None = None) -> bytes:
    if fmt == FORMAT_PNG:
        return render_png(data, box_size=box_size, border=border)
    if fmt == FORMAT_SVG:
        return render_svg(data, box_size=box_size, border=border)
    raise ValueError(f"Unknown image format: {fmt}")


def to_data_uri(image_bytes: bytes, fmt: str = FORMAT_PNG) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{MEDIA_TYPES[fmt]};base64,{encoded}"


def render_qr_payload(payload: str) -> dict[str, Any]:
    """Render payload into PNG bytes and base64 string."""

    png_bytes = render_png(payload)
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
    }
