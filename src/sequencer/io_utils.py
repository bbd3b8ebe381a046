"""File helpers: image recognition and timestamp metadata.

This module decides which file names count as images and reads the
timestamps used to order them. When the platform does not record a file's
birth time, the EXIF capture time embedded in the image is used instead.
"""

from __future__ import annotations

import logging
import os
import struct
from datetime import datetime
from pathlib import Path
from typing import Optional

import piexif
from PIL import Image, UnidentifiedImageError

from config import IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# Formats Pillow cannot open; never probed for EXIF
_VECTOR_EXTENSIONS = {".svg"}


def split_extension(name: str) -> tuple[str, str]:
    """Split a file name into (basename, extension).

    The extension keeps its leading dot and is ``""`` when there is none.
    Dot-files such as ``.hidden`` have no extension.
    """

    dot = name.rfind(".")
    if dot <= 0:
        return name, ""
    return name[:dot], name[dot:]


def is_image_name(name: str) -> bool:
    """Whether a file name carries a recognized image extension."""

    return split_extension(name)[1].lower() in IMAGE_EXTENSIONS


def load_exif_bytes(image_path: Path) -> Optional[bytes]:
    """Return raw EXIF bytes of an image, or None.

    Parameters
    ----------
    image_path
        Path to the image file.
    """

    try:
        with Image.open(image_path) as img:
            exif = img.info.get("exif")
            if exif:
                return exif
            exif_obj = img.getexif()
            return exif_obj.tobytes() if exif_obj else None
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("No EXIF for %s: %s", image_path, exc)
        return None


def read_capture_time(image_path: Path) -> Optional[float]:
    """Read the EXIF ``DateTimeOriginal`` of an image as a POSIX timestamp.

    Parameters
    ----------
    image_path
        Path to the image file.

    Returns
    -------
    float or None
        Capture time in seconds, or None when the image has no usable EXIF.
    """

    path = Path(image_path)
    if path.suffix.lower() in _VECTOR_EXTENSIONS:
        return None
    exif_bytes = load_exif_bytes(path)
    if not exif_bytes:
        return None
    try:
        exif = piexif.load(exif_bytes)
    except (ValueError, struct.error) as exc:
        logger.debug("Unparseable EXIF in %s: %s", path, exc)
        return None

    raw = exif.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
    if not raw:
        raw = exif.get("0th", {}).get(piexif.ImageIFD.DateTime)
    if not raw:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("ascii", errors="ignore")
    try:
        return datetime.strptime(raw.strip("\x00 "), EXIF_DATETIME_FORMAT).timestamp()
    except ValueError:
        logger.debug("Bad EXIF date %r in %s", raw, path)
        return None


def file_creation_time(
    path: Path, stat: os.stat_result, use_exif: bool = True
) -> Optional[float]:
    """Best-known creation time of a file.

    Parameters
    ----------
    path
        Filesystem path of the file.
    stat
        Result of ``os.stat`` for ``path``.
    use_exif
        Whether to fall back to the EXIF capture time of images.

    Returns
    -------
    float or None
        Platform birth time when available, else the EXIF capture time,
        else None.
    """

    birth = getattr(stat, "st_birthtime", None)
    if birth:
        return float(birth)
    if use_exif and is_image_name(path.name):
        return read_capture_time(path)
    return None
