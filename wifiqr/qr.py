from __future__ import annotations

import io
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from PIL import Image

from .payload import Credential, build
from .settings import settings

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class GenerationError(Exception):
    """Any failure while turning a payload into an image file."""

class QrCodeError(GenerationError):
    """The payload does not fit in a QR symbol."""

class ImageError(GenerationError):
    """The QR raster could not be encoded in the requested format."""

class OutputError(GenerationError):
    """The encoded image could not be written."""


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    QOI = "qoi"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

_EXTENSIONS = {
    ImageFormat.PNG: "png",
    ImageFormat.JPEG: "jpg",
    ImageFormat.QOI: "qoi",
}

_MEDIA_TYPES = {
    ImageFormat.PNG: "image/png",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.QOI: "image/qoi",
}

# Pillow format names
_PIL_FORMATS = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
}

_SUFFIXES = {
    ".png": ImageFormat.PNG,
    ".jpg": ImageFormat.JPEG,
    ".jpeg": ImageFormat.JPEG,
    ".qoi": ImageFormat.QOI,
}


def guess_format(path: Union[str, Path]) -> ImageFormat:
    # unknown or missing extensions fall back to PNG
    return _SUFFIXES.get(Path(path).suffix.lower(), ImageFormat.PNG)


def render_qr(
    text: str,
    error_correction: Optional[str] = None,
    box_size: Optional[int] = None,
    border: Optional[int] = None,
) -> qrcode.QRCode:
    level = (error_correction or settings.error_correction).upper()
    if level not in ERROR_CORRECTION_LEVELS:
        raise ValueError(f"Unknown error correction level '{level}', expected one of L, M, Q, H.")
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION_LEVELS[level],
        box_size=box_size if box_size is not None else settings.box_size,
        border=border if border is not None else settings.border,
        image_factory=PilImage,
    )
    try:
        qr.add_data(text)
        qr.make(fit=True)
    except UnicodeError as e:
        raise QrCodeError(f"Payload cannot be encoded in a QR code: {e}") from e
    except (DataOverflowError, ValueError) as e:
        raise QrCodeError(f"Payload of {len(text)} characters does not fit in a QR code: {e}") from e
    logger.debug("QR symbol version %s, error correction %s", qr.version, level)
    return qr


def render_matrix(text: str, **kwargs) -> List[List[bool]]:
    """Module matrix including the quiet zone, True for dark modules."""
    return render_qr(text, **kwargs).get_matrix()


def render_image(text: str, **kwargs) -> Image.Image:
    qr = render_qr(text, **kwargs)
    img = qr.make_image(fill_color="black", back_color="white")
    return img.get_image().convert("L")


def encode_image(image: Image.Image, image_format: ImageFormat) -> bytes:
    image_format = ImageFormat(image_format)
    try:
        buf = io.BytesIO()
        if image_format is ImageFormat.QOI:
            # luma copied to RGB, declared sRGB; every pixel is opaque
            image.convert("RGB").save(buf, format="QOI", colorspace="sRGB")
        else:
            image.save(buf, format=_PIL_FORMATS[image_format])
        data = buf.getvalue()
    except (OSError, ValueError, KeyError) as e:
        raise ImageError(f"Could not encode image as {image_format.value}: {e}") from e
    logger.debug("Encoded %dx%d image as %s (%d bytes)", image.width, image.height, image_format.value, len(data))
    return data


def write_image(data: bytes, out_path: Union[str, Path]) -> None:
    # the parent directory must already exist
    try:
        Path(out_path).write_bytes(data)
    except OSError as e:
        raise OutputError(f"Could not write {out_path}: {e.strerror or e}") from e
    logger.debug("Wrote %d bytes to %s", len(data), out_path)


def make_qr_image(text: str, image_format: ImageFormat = ImageFormat.PNG) -> bytes:
    return encode_image(render_image(text), image_format)


def make_qr_file(text: str, out_path: Union[str, Path], image_format: Optional[ImageFormat] = None) -> ImageFormat:
    if image_format is None:
        image_format = guess_format(out_path)
        logger.debug("Guessed format %s from %s", image_format.value, out_path)
    # render and encode before touching the file system so failures leave nothing behind
    data = make_qr_image(text, image_format)
    write_image(data, out_path)
    return ImageFormat(image_format)


def generate_image_file(
    credential: Credential,
    out_path: Union[str, Path],
    image_format: Optional[ImageFormat] = None,
) -> ImageFormat:
    return make_qr_file(build(credential), out_path, image_format)
