from dataclasses import dataclass

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class UploadedFile:
    """A file received with a request, fully read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TransformOutput:
    """One document produced by an operation, not yet stored."""

    original_name: str
    data: bytes
