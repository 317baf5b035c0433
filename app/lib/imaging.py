# app/lib/imaging.py
from __future__ import annotations
import base64
import io
import re
from typing import Tuple

from PIL import Image

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<b64>.+)$", re.IGNORECASE | re.DOTALL)

_EXT_BY_MIME = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

def sniff_mime(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return "image/gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"

def is_data_url(s: str) -> bool:
    return bool(s) and s.startswith("data:") and ";base64," in s

def parse_data_url(value: str) -> Tuple[str, bytes]:
    """
    Returns (mime, bytes) for 'data:image/png;base64,...' or raw base64.
    Raw payloads get their mime sniffed from the magic bytes.
    """
    if not value:
        raise ValueError("empty image payload")
    m = _DATA_URL_RE.match(value.strip())
    if m:
        b64 = "".join(m.group("b64").split())
        data = base64.b64decode(b64 + "=" * ((-len(b64)) % 4))
        return m.group("mime").lower(), data
    raw = "".join(value.split())
    data = base64.b64decode(raw + "=" * ((-len(raw)) % 4))
    return sniff_mime(data), data

def to_data_url(payload: bytes | str, mime: str = "image/png") -> str:
    """Wrap raw bytes or an already base64-encoded string into a data URI."""
    if isinstance(payload, bytes):
        payload = base64.b64encode(payload).decode("ascii")
    return f"data:{mime};base64,{payload}"

def as_upload(value: str, stem: str = "reference") -> Tuple[str, bytes, str]:
    """(filename, bytes, mime) tuple accepted by the OpenAI SDK's file parameters."""
    mime, data = parse_data_url(value)
    if mime == "application/octet-stream":
        mime = sniff_mime(data)
    return f"{stem}{_EXT_BY_MIME.get(mime, '.png')}", data, mime

def open_image(value: str) -> Image.Image:
    _, data = parse_data_url(value)
    img = Image.open(io.BytesIO(data))
    img.load()
    return img
