from abc import ABC, abstractmethod
from collections.abc import Sequence

DEFAULT_IMAGE_QUALITY = 80
DEFAULT_WATERMARK_FONT_SIZE = 50.0
DEFAULT_WATERMARK_ANGLE = 45.0


class BaseTransformer(ABC):
    """Contract for PDF transformation engines.

    Every operation decodes its inputs, transforms the page structure and
    returns freshly encoded bytes. Inputs are never modified and no state is
    kept between calls, so one instance can serve concurrent requests.
    Decode failures raise ProcessingError; bad arguments raise ValidationError.
    """

    @abstractmethod
    def merge(self, buffers: Sequence[bytes]) -> bytes:
        """Concatenate the pages of at least two documents, in input order."""

    @abstractmethod
    def split(self, buffer: bytes, page_numbers: Sequence[int]) -> list[bytes]:
        """Produce one single-page document per requested 1-based page number."""

    @abstractmethod
    def compress(self, buffer: bytes, image_quality: int = DEFAULT_IMAGE_QUALITY) -> bytes:
        """Re-encode raster images at a JPEG quality of 1-100."""

    @abstractmethod
    def watermark(
        self,
        buffer: bytes,
        text: str,
        font_size: float = DEFAULT_WATERMARK_FONT_SIZE,
        angle: float = DEFAULT_WATERMARK_ANGLE,
    ) -> bytes:
        """Overlay semi-transparent gray text centered on every page."""

    @abstractmethod
    def rotate(self, buffer: bytes, page_numbers: Sequence[int], angle: int | None) -> bytes:
        """Set the absolute rotation of the given 1-based pages."""
