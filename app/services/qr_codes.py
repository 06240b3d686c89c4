"""Printable QR labels for assets: the report deep link plus name and tag."""

from __future__ import annotations

import re
from io import BytesIO

import qrcode
from PIL import Image, ImageDraw, ImageFont

from app.models.asset import Asset
from app.services.deep_link import report_url

QR_SIZE = 256
PADDING = 32
LABEL_HEIGHT = 60


def qr_filename(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.strip()).lower()
    return f"qr-{slug or 'asset'}.png"


def _qr_image(data: str) -> Image.Image:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    return img.convert("RGB").resize((QR_SIZE, QR_SIZE), Image.Resampling.NEAREST)


def _draw_centered(draw: ImageDraw.ImageDraw, text: str, y: int, width: int, font) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (right - left)) / 2, y), text, fill="black", font=font)


def render_label(data: str, name: str, tag: str | None = None) -> bytes:
    """PNG bytes: the QR code with the name (and ``Tag: ...``) beneath it."""
    width = QR_SIZE + 2 * PADDING
    height = QR_SIZE + 2 * PADDING + LABEL_HEIGHT
    canvas = Image.new("RGB", (width, height), "white")
    canvas.paste(_qr_image(data), (PADDING, PADDING))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    y = PADDING + QR_SIZE + 12
    _draw_centered(draw, name, y, width, font)
    if tag:
        _draw_centered(draw, f"Tag: {tag}", y + 22, width, font)

    buf = BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()


def asset_qr_png(asset: Asset, base_url: str | None = None) -> bytes:
    return render_label(report_url(asset.id, base_url), asset.name, asset.asset_tag)
