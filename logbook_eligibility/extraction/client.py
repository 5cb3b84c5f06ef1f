"""Vision extraction client.

Sends one logbook page image and the fixed extraction prompt to a
messages-style vision API and returns the model's raw text response.
Any failure is reported as a single ExtractionError; retries are left
to the caller.
"""

import base64
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import requests

from ..config import Config
from ..exceptions import ExtractionError
from .prompts import LOGBOOK_EXTRACTION_PROMPT

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, str, Path]

_MEDIA_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
}
DEFAULT_MEDIA_TYPE = 'image/jpeg'


def encode_image(image: ImageInput) -> Tuple[str, str]:
    """
    Convert an image input to base64 data and a media type.

    Args:
        image: Raw bytes, a file path, a base64 string or a data: URL

    Returns:
        Tuple of (base64 data, media type)
    """
    if isinstance(image, bytes):
        return base64.b64encode(image).decode('ascii'), DEFAULT_MEDIA_TYPE

    if isinstance(image, Path):
        if not image.is_file():
            raise FileNotFoundError(f"Image file not found: {image}")
        media_type = _MEDIA_TYPES.get(image.suffix.lower(), DEFAULT_MEDIA_TYPE)
        return base64.b64encode(image.read_bytes()).decode('ascii'), media_type

    if image.startswith('data:'):
        header, _, data = image.partition(',')
        media_type = header[len('data:'):].split(';')[0] or DEFAULT_MEDIA_TYPE
        return data, media_type

    # Already base64
    return image, DEFAULT_MEDIA_TYPE


class VisionClient:
    """Client for the vision model that reads logbook pages."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = Config.VISION_MAX_TOKENS,
        timeout: float = Config.VISION_TIMEOUT_SECONDS,
    ):
        """
        Initialize with API key and endpoint.

        Args:
            api_key: Vision API key (default: VISION_API_KEY environment variable)
            endpoint: Messages endpoint URL
            model: Model name
            max_tokens: Response token limit
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or Config.get_vision_api_key()
        if not self.api_key:
            raise ValueError(
                "API key must be provided or set via VISION_API_KEY environment variable."
            )

        self.endpoint = endpoint or Config.VISION_API_ENDPOINT
        self.model = model or Config.VISION_MODEL
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.headers = {
            'Content-Type': 'application/json',
            'x-api-key': self.api_key,
            'anthropic-version': Config.VISION_API_VERSION,
        }
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.info(f"Using vision model: {self.model}")

    def extract_page(self, image_data: str, media_type: str = DEFAULT_MEDIA_TYPE) -> str:
        """
        Send one page image for extraction.

        Args:
            image_data: Base64-encoded image
            media_type: Image media type

        Returns:
            The model's text response

        Raises:
            ExtractionError: On network failure, non-200 status or empty response
        """
        body = {
            'model': self.model,
            'max_tokens': self.max_tokens,
            'messages': [{
                'role': 'user',
                'content': [
                    {
                        'type': 'image',
                        'source': {
                            'type': 'base64',
                            'media_type': media_type,
                            'data': image_data,
                        },
                    },
                    {'type': 'text', 'text': LOGBOOK_EXTRACTION_PROMPT},
                ],
            }],
        }

        try:
            response = requests.post(
                self.endpoint, headers=self.headers, json=body, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ExtractionError(f"Vision API request failed: {e}", original_error=e)

        if response.status_code != 200:
            raise ExtractionError(
                f"API Error: {response.text}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExtractionError("Vision API returned a non-JSON body", original_error=e)

        text = ''.join(
            block.get('text', '')
            for block in data.get('content') or []
            if isinstance(block, dict) and block.get('type') == 'text'
        )
        if not text.strip():
            raise ExtractionError("Vision API returned no text content")

        self.logger.debug(f"Vision response preview: {text[:200]}...")
        return text
