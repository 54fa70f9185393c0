"""
Receipt Image Compression

Receipts are attached to transactions as small JPEG data URLs so they can
live inside the ledger record itself.

This service handles:
1. Decoding the uploaded image
2. Scaling it down to the configured maximum width (aspect ratio kept)
3. Re-encoding as JPEG at the configured quality
4. Returning a data URL ready for Transaction.receipt
"""

import base64
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from lifeledger.config import ReceiptSettings, get_settings


DATA_URL_PREFIX = "data:image/jpeg;base64,"


class ReceiptCompressionError(Exception):
    """Base exception for receipt compression errors."""
    pass


class UnreadableReceiptError(ReceiptCompressionError):
    """The upload is not an image we can decode."""
    pass


class ReceiptTooLargeError(ReceiptCompressionError):
    """The upload exceeds the configured size limit."""
    pass


class CompressedReceipt(BaseModel):
    """Result of compressing one receipt image."""

    data_url: str
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    original_width: int = Field(..., ge=1)
    original_height: int = Field(..., ge=1)
    size_bytes: int = Field(
        ...,
        ge=0,
        description="Size of the encoded JPEG"
    )

    @property
    def was_resized(self) -> bool:
        return self.width != self.original_width


class ReceiptCompressor:
    """Downscales and re-encodes receipt photos with Pillow."""

    def __init__(self, settings: Optional[ReceiptSettings] = None):
        self._settings = settings or get_settings().receipts

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """Size after scaling down to the maximum width."""
        max_width = self._settings.max_width
        if width <= max_width:
            return width, height
        return max_width, max(1, round(height * max_width / width))

    def compress(self, image_bytes: bytes) -> CompressedReceipt:
        if len(image_bytes) > self._settings.max_upload_size_bytes:
            raise ReceiptTooLargeError(
                f"Receipt is larger than {self._settings.max_upload_size_mb} MB"
            )

        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise UnreadableReceiptError(f"Could not read receipt image: {e}") from e

        original_width, original_height = img.size
        width, height = self.target_size(original_width, original_height)

        # JPEG has no alpha channel or palette
        if img.mode != "RGB":
            img = img.convert("RGB")
        if (width, height) != img.size:
            img = img.resize((width, height), Image.Resampling.LANCZOS)

        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=self._settings.jpeg_quality)
        encoded = buffer.getvalue()

        return CompressedReceipt(
            data_url=DATA_URL_PREFIX + base64.b64encode(encoded).decode("ascii"),
            width=width,
            height=height,
            original_width=original_width,
            original_height=original_height,
            size_bytes=len(encoded),
        )


def decode_receipt(data_url: str) -> bytes:
    """JPEG bytes of a stored receipt data URL."""
    if not data_url.startswith(DATA_URL_PREFIX):
        raise UnreadableReceiptError("Receipt is not a JPEG data URL")
    return base64.b64decode(data_url[len(DATA_URL_PREFIX):])
