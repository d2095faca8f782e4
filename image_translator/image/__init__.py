"""Uploaded image container and transport-safe encoding."""

from .encoding import (
    UploadedImage,
    decode_image,
    encode_image,
    strip_data_url_prefix,
    to_data_url,
)

__all__ = [
    "UploadedImage",
    "decode_image",
    "encode_image",
    "strip_data_url_prefix",
    "to_data_url",
]
