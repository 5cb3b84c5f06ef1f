"""Vision extraction call and response parsing."""

from .client import VisionClient, encode_image
from .payload import find_json_object, parse_extraction_payload

__all__ = [
    "VisionClient",
    "encode_image",
    "find_json_object",
    "parse_extraction_payload",
]
