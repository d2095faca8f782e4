"""Image upload container and base64 encoding for JSON request bodies.

The encoded form carries no ``data:<mime>;base64,`` scheme prefix; that
prefix is only added for the in-page preview.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

from image_translator.errors import ReadFailure

DEFAULT_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class UploadedImage:
    """Binary payload plus its declared media type."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE
    filename: Optional[str] = None

    @classmethod
    def from_stream(cls, stream: BinaryIO, mime_type: Optional[str] = None, filename: Optional[str] = None) -> "UploadedImage":
        """Read the whole stream into a new image.

        Doxygen:
        - @param stream: Readable binary stream (e.g. an uploaded file).
        - @param mime_type: Declared media type; guessed from `filename` when it is
          empty or not an `image/*` type.
        - @param filename: Original file name, informational only.
        - @return: New `UploadedImage`.
        - @throws ReadFailure: If reading the stream fails.
        """
        try:
            data = stream.read()
        except (OSError, ValueError) as e:
            raise ReadFailure(f"failed to read image: {e}")
        if not isinstance(data, (bytes, bytearray)):
            raise ReadFailure("failed to read image: stream did not return bytes")
        if not mime_type or not mime_type.startswith("image/"):
            mime_type = _guess_mime_type(filename)
        return cls(bytes(data), mime_type, filename)

    @classmethod
    def from_path(cls, path: str) -> "UploadedImage":
        try:
            with open(path, "rb") as f:
                return cls.from_stream(f, filename=os.path.basename(path))
        except OSError as e:
            raise ReadFailure(f"failed to read image: {e}")

    @property
    def size(self) -> int:
        return len(self.data)


def _guess_mime_type(filename: Optional[str]) -> str:
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed and guessed.startswith("image/"):
            return guessed
    return DEFAULT_MIME_TYPE


def encode_image(image: UploadedImage) -> str:
    """Return the base64 text of the image bytes, ready for a JSON body.

    Doxygen:
    - @param image: Image to encode.
    - @return: ASCII base64 string without any scheme prefix.
    - @throws ReadFailure: If the payload is not readable binary data.
    """
    if image is None:
        raise ReadFailure("failed to read image: no image data")
    try:
        return base64.b64encode(memoryview(image.data)).decode("ascii")
    except (TypeError, ValueError) as e:
        raise ReadFailure(f"failed to read image: {e}")


def decode_image(encoded: str) -> bytes:
    """Inverse of `encode_image`; a leading data-URL prefix is tolerated."""
    try:
        return base64.b64decode(strip_data_url_prefix(encoded), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ReadFailure(f"failed to decode image: {e}")


def to_data_url(image: UploadedImage) -> str:
    return f"data:{image.mime_type};base64,{encode_image(image)}"


def strip_data_url_prefix(value: str) -> str:
    """Drop a ``data:...;base64,`` prefix if present; other strings pass through."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value
