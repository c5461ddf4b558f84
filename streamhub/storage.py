# streamhub/storage.py
"""
Persists uploaded media and hands back the public URL.

``STORAGE_BACKEND=local`` (the default) writes under ``UPLOAD_DIR`` which the
app serves at ``UPLOAD_URL_PREFIX``; ``s3`` pushes to ``AWS_BUCKET_NAME``.
"""
import logging
import os
import re
import shutil
import time
import uuid
from urllib.parse import quote, urlparse

import boto3

from streamhub.config import (
    STORAGE_BACKEND,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_REGION,
    AWS_BUCKET_NAME,
)

logger = logging.getLogger(__name__)

_SAFE_FILENAME_RE = re.compile(r'[^a-zA-Z0-9._-]+')

_s3 = None


def _s3_client():
    global _s3
    if _s3 is None:
        _s3 = boto3.client(
            "s3",
            region_name=AWS_REGION,
            aws_access_key_id=AWS_ACCESS_KEY_ID,
            aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
        )
    return _s3


def sanitize_filename(name: str) -> str:
    """
    Make sure filenames are URL-safe:
    - Trim whitespace
    - Replace spaces and unsafe chars with '-'
    - Collapse repeats
    """
    name = (name or "").strip()
    name = re.sub(r'\s+', '-', name)
    name = _SAFE_FILENAME_RE.sub('-', name)
    name = re.sub(r'-{2,}', '-', name)
    if not name:
        name = "file"
    return name


def _unique_name(prefix: str, filename: str) -> str:
    # video_<millis>_<short uuid>_<name>
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{sanitize_filename(filename)}"


def save_upload(fileobj, filename: str, content_type: str, *, prefix: str) -> str:
    name = _unique_name(prefix, filename)

    if STORAGE_BACKEND == "s3":
        key = f"uploads/{name}"
        _s3_client().upload_fileobj(
            fileobj,
            AWS_BUCKET_NAME,
            key,
            ExtraArgs={"ContentType": content_type or "application/octet-stream"},
        )
        key_encoded = quote(key, safe="/-._")
        return f"https://{AWS_BUCKET_NAME}.s3.{AWS_REGION}.amazonaws.com/{key_encoded}"

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(UPLOAD_DIR, name), "wb") as out:
        shutil.copyfileobj(fileobj, out)
    return f"{UPLOAD_URL_PREFIX}/{name}"


def delete_upload(url: str) -> None:
    if STORAGE_BACKEND == "s3":
        key = urlparse(url).path.lstrip("/")
        _s3_client().delete_object(Bucket=AWS_BUCKET_NAME, Key=key)
        return

    if not url.startswith(UPLOAD_URL_PREFIX + "/"):
        return
    path = os.path.join(UPLOAD_DIR, os.path.basename(url))
    if os.path.exists(path):
        os.remove(path)
