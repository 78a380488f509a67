from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import pymupdf

from pdfhub.exceptions import AppError, ProcessingError, ValidationError
from pdfhub.logging.logger import Log
from pdfhub.transform.base import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_WATERMARK_ANGLE,
    DEFAULT_WATERMARK_FONT_SIZE,
    BaseTransformer,
)

WATERMARK_COLOR = (0.5, 0.5, 0.5)
WATERMARK_OPACITY = 0.3
WATERMARK_FONT = "helv"


class PyMuPdfTransformer(BaseTransformer):
    """PDF transformations built on PyMuPDF."""

    def merge(self, buffers: Sequence[bytes]) -> bytes:
        if len(buffers) < 2:
            raise ProcessingError("At least 2 PDF files are required to merge")
        with _new_document() as merged:
            for index, buffer in enumerate(buffers, start=1):
                with _open(buffer, f"input {index}") as source:
                    merged.insert_pdf(source)
            return _serialize(merged)

    def split(self, buffer: bytes, page_numbers: Sequence[int]) -> list[bytes]:
        if not page_numbers:
            raise ValidationError("Please specify pages to split")
        with _open(buffer) as source:
            if len(page_numbers) > source.page_count:
                raise ProcessingError(
                    f"Cannot split into {len(page_numbers)} documents "
                    f"(document has {source.page_count} pages)"
                )
            _check_page_numbers(page_numbers, source.page_count)
            outputs = []
            for number in page_numbers:
                with _new_document() as single:
                    single.insert_pdf(source, from_page=number - 1, to_page=number - 1)
                    outputs.append(_serialize(single))
        return outputs

    def compress(self, buffer: bytes, image_quality: int = DEFAULT_IMAGE_QUALITY) -> bytes:
        if not 1 <= image_quality <= 100:
            raise ValidationError("imageQuality must be between 1 and 100")
        with _open(buffer) as doc:
            replaced = 0
            seen: set[int] = set()
            for page in doc:
                for image in page.get_images(full=True):
                    xref, smask = image[0], image[1]
                    if xref in seen:
                        continue
                    seen.add(xref)
                    if smask:
                        continue  # JPEG has no alpha channel
                    if _recompress_image(doc, page, xref, image_quality):
                        replaced += 1
            Log.debug(f"Re-encoded {replaced} of {len(seen)} images at quality {image_quality}")
            return _serialize(doc, garbage=4)

    def watermark(
        self,
        buffer: bytes,
        text: str,
        font_size: float = DEFAULT_WATERMARK_FONT_SIZE,
        angle: float = DEFAULT_WATERMARK_ANGLE,
    ) -> bytes:
        if not text or not text.strip():
            raise ValidationError("Watermark text is required")
        if font_size <= 0:
            raise ValidationError("fontSize must be positive")
        text_width = pymupdf.get_text_length(text, fontname=WATERMARK_FONT, fontsize=font_size)
        with _open(buffer) as doc:
            for page in doc:
                rect = page.rect * page.derotation_matrix
                center = pymupdf.Point((rect.x0 + rect.x1) / 2, (rect.y0 + rect.y1) / 2)
                # baseline start so that the text box is centered before rotation
                origin = pymupdf.Point(center.x - text_width / 2, center.y + font_size / 3)
                page.insert_text(
                    origin,
                    text,
                    fontsize=font_size,
                    fontname=WATERMARK_FONT,
                    color=WATERMARK_COLOR,
                    fill_opacity=WATERMARK_OPACITY,
                    stroke_opacity=WATERMARK_OPACITY,
                    # y axis points down, so a negative matrix angle turns counter-clockwise
                    morph=(center, pymupdf.Matrix(-angle)),
                    overlay=True,
                )
            return _serialize(doc)

    def rotate(self, buffer: bytes, page_numbers: Sequence[int], angle: int | None) -> bytes:
        if not page_numbers or angle is None:
            raise ValidationError("Please specify pages and rotation angle")
        if angle % 90 != 0:
            raise ValidationError("Rotation angle must be a multiple of 90")
        with _open(buffer) as doc:
            _check_page_numbers(page_numbers, doc.page_count)
            for number in page_numbers:
                doc[number - 1].set_rotation(angle % 360)
            return _serialize(doc)


@contextmanager
def _open(buffer: bytes, label: str = "document") -> Iterator[pymupdf.Document]:
    try:
        doc = pymupdf.open(stream=buffer, filetype="pdf")  # type: ignore[no-untyped-call]
    except Exception as exc:
        raise ProcessingError(f"Could not read PDF {label}: {exc}") from exc
    try:
        if doc.needs_pass:
            raise ProcessingError(f"PDF {label} is password protected")
        yield doc
    except AppError:
        raise
    except Exception as exc:
        raise ProcessingError(f"Could not transform PDF {label}: {exc}") from exc
    finally:
        doc.close()


@contextmanager
def _new_document() -> Iterator[pymupdf.Document]:
    doc = pymupdf.open()  # type: ignore[no-untyped-call]
    try:
        yield doc
    finally:
        doc.close()


def _serialize(doc: pymupdf.Document, garbage: int = 3) -> bytes:
    # no_new_id keeps output byte-identical for identical input
    return doc.tobytes(garbage=garbage, deflate=True, no_new_id=True)


def _check_page_numbers(page_numbers: Sequence[int], page_count: int) -> None:
    for number in page_numbers:
        if not 1 <= number <= page_count:
            raise ProcessingError(
                f"Page {number} is out of range (document has {page_count} pages)"
            )


def _recompress_image(
    doc: pymupdf.Document,
    page: pymupdf.Page,
    xref: int,
    quality: int,
) -> bool:
    """Replace an image with a JPEG re-encode when that is smaller."""
    try:
        pix = pymupdf.Pixmap(doc, xref)
        if pix.alpha:
            return False
        if pix.colorspace is None or pix.colorspace.n not in (1, 3):
            pix = pymupdf.Pixmap(pymupdf.csRGB, pix)
        encoded = pix.tobytes("jpg", jpg_quality=quality)
    except Exception as exc:
        Log.warning(f"Skipping image {xref}: {exc}")
        return False
    if len(encoded) >= len(doc.xref_stream_raw(xref) or b""):
        return False
    page.replace_image(xref, stream=encoded)
    return True
