import io
from typing import Optional, Tuple

from PIL import Image

from streamhub.config import THUMBNAIL_MAX_BYTES, THUMBNAIL_MAX_W, THUMBNAIL_MAX_H
from streamhub.errors import ValidationError

ALLOWED_THUMBNAIL_MIMES = {"image/png", "image/jpeg", "image/webp"}
ALLOWED_VIDEO_MIMES = {
    "video/mp4",
    "video/avi",
    "video/x-msvideo",
    "video/mov",
    "video/quicktime",
    "video/wmv",
    "video/x-ms-wmv",
}


def sniff_image_dims(data: bytes) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return int(im.width), int(im.height)
    except Exception:
        return None


def check_thumbnail(data: bytes, content_type: Optional[str]) -> Tuple[int, int]:
    if content_type not in ALLOWED_THUMBNAIL_MIMES:
        raise ValidationError("Unsupported thumbnail type.")
    if not data:
        raise ValidationError("Empty thumbnail file.")
    if len(data) > THUMBNAIL_MAX_BYTES:
        raise ValidationError("Thumbnail too large.")

    dims = sniff_image_dims(data)
    if not dims:
        raise ValidationError("Thumbnail is not a valid image.")
    width, height = dims
    if width > THUMBNAIL_MAX_W or height > THUMBNAIL_MAX_H:
        raise ValidationError(f"Thumbnail dimensions too large (max {THUMBNAIL_MAX_W}x{THUMBNAIL_MAX_H}).")
    return dims


def check_video(content_type: Optional[str]) -> None:
    if content_type not in ALLOWED_VIDEO_MIMES:
        raise ValidationError("Please select a valid video file (MP4, AVI, MOV, WMV)")
