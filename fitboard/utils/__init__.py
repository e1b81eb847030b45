"""Utility helpers for FitBoard."""

from .images import decode_data_url, detect_mime_type, encode_png, open_image, to_data_url

__all__ = [
    "decode_data_url",
    "detect_mime_type",
    "encode_png",
    "open_image",
    "to_data_url",
]
