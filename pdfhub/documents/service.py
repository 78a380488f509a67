import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from werkzeug.utils import secure_filename

from pdfhub.database.models import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    Account,
    DocumentRecord,
)
from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.documents.models import PDF_MIME_TYPE, TransformOutput, UploadedFile
from pdfhub.exceptions import FileUploadError, NotFoundError, ValidationError
from pdfhub.logging.logger import Log
from pdfhub.pdf.base import BasePdfInspector
from pdfhub.quota.ledger import QuotaLedger
from pdfhub.storage.base import BaseBlobStorage, document_storage_key
from pdfhub.storage.exceptions import BlobNotFoundError
from pdfhub.transform.base import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_WATERMARK_ANGLE,
    DEFAULT_WATERMARK_FONT_SIZE,
    BaseTransformer,
)


class DocumentService:
    """Runs one document request: validate -> admit -> transform -> admit -> store.

    Admission happens on the input sizes before any transformation work, and
    again on the actual output sizes before anything is persisted. Outputs are
    staged in blob storage and only become `completed` once every output of
    the request is stored; on any failure, including aborted requests, staged
    blobs are removed and the request's records are marked `failed`.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        storage: BaseBlobStorage,
        transformer: BaseTransformer,
        inspector: BasePdfInspector,
        quota: QuotaLedger,
        *,
        max_upload_bytes: int,
        max_merge_files: int,
        document_ttl: timedelta,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._doc_repo = doc_repo
        self._storage = storage
        self._transformer = transformer
        self._inspector = inspector
        self._quota = quota
        self._max_upload_bytes = max_upload_bytes
        self._max_merge_files = max_merge_files
        self._document_ttl = document_ttl
        self._clock = clock

    def upload(self, account: Account, file: UploadedFile | None) -> DocumentRecord:
        file = self._check_file(file)
        [record] = self._store(account, [TransformOutput(file.filename, file.data)], "upload")
        return record

    def merge(self, account: Account, files: Sequence[UploadedFile]) -> DocumentRecord:
        if len(files) < 2:
            raise FileUploadError("At least 2 PDF files are required")
        if len(files) > self._max_merge_files:
            raise FileUploadError(f"At most {self._max_merge_files} PDF files can be merged")
        checked = [self._check_file(f) for f in files]
        self._quota.admit(account, sum(f.size for f in checked))
        merged = self._transformer.merge([f.data for f in checked])
        [record] = self._store(account, [TransformOutput("merged.pdf", merged)], "merge")
        return record

    def split(
        self,
        account: Account,
        file: UploadedFile | None,
        pages: Sequence[int],
    ) -> list[DocumentRecord]:
        file = self._check_file(file)
        if not pages:
            raise ValidationError("Please specify pages to split")
        self._quota.admit(account, file.size)
        parts = self._transformer.split(file.data, pages)
        outputs = [
            TransformOutput(f"page_{number}.pdf", data) for number, data in zip(pages, parts)
        ]
        return self._store(account, outputs, "split")

    def compress(
        self,
        account: Account,
        file: UploadedFile | None,
        image_quality: int = DEFAULT_IMAGE_QUALITY,
    ) -> DocumentRecord:
        file = self._check_file(file)
        self._quota.admit(account, file.size)
        compressed = self._transformer.compress(file.data, image_quality)
        [record] = self._store(account, [TransformOutput("compressed.pdf", compressed)], "compress")
        return record

    def watermark(
        self,
        account: Account,
        file: UploadedFile | None,
        text: str,
        font_size: float = DEFAULT_WATERMARK_FONT_SIZE,
        angle: float = DEFAULT_WATERMARK_ANGLE,
    ) -> DocumentRecord:
        file = self._check_file(file)
        if not text or not text.strip():
            raise ValidationError("Watermark text is required")
        self._quota.admit(account, file.size)
        marked = self._transformer.watermark(file.data, text, font_size, angle)
        [record] = self._store(account, [TransformOutput("watermarked.pdf", marked)], "watermark")
        return record

    def rotate(
        self,
        account: Account,
        file: UploadedFile | None,
        pages: Sequence[int],
        angle: int | None,
    ) -> DocumentRecord:
        file = self._check_file(file)
        if not pages or angle is None:
            raise ValidationError("Please specify pages and rotation angle")
        self._quota.admit(account, file.size)
        rotated = self._transformer.rotate(file.data, pages, angle)
        [record] = self._store(account, [TransformOutput("rotated.pdf", rotated)], "rotate")
        return record

    def list_documents(self, account: Account) -> list[DocumentRecord]:
        """Non-expired documents of the account, newest first."""
        return self._doc_repo.list_by_owner(account.id, self._clock())

    def get_document(self, account: Account, document_id: str) -> DocumentRecord:
        record = self._doc_repo.find_owned(document_id, account.id)
        if record is None or record.is_expired(self._clock()):
            raise NotFoundError("PDF not found")
        return record

    def download(self, account: Account, document_id: str) -> tuple[DocumentRecord, bytes]:
        record = self.get_document(account, document_id)
        if record.status != STATUS_COMPLETED:
            raise NotFoundError("PDF not found")
        try:
            return record, self._storage.get(record.storage_key)
        except BlobNotFoundError as exc:
            raise NotFoundError("PDF not found") from exc

    def delete_document(self, account: Account, document_id: str) -> None:
        """Delete an owned document and its stored bytes."""
        record = self._doc_repo.find_owned(document_id, account.id)
        if record is None:
            raise NotFoundError("PDF not found")
        try:
            self._storage.delete(record.storage_key)
        except Exception as exc:
            Log.error(f"Could not delete blob {record.storage_key}: {exc}")
        self._doc_repo.delete(record.id)
        Log.info(f"Document {record.id} deleted by account {account.id}")

    def _check_file(self, file: UploadedFile | None) -> UploadedFile:
        if file is None or not file.filename:
            raise FileUploadError("No file uploaded")
        if file.content_type != PDF_MIME_TYPE:
            raise FileUploadError("Only PDF files are allowed")
        if file.size == 0:
            raise FileUploadError("Uploaded file is empty")
        if file.size > self._max_upload_bytes:
            raise FileUploadError(
                f"File exceeds the {self._max_upload_bytes // (1024 * 1024)}MB limit"
            )
        return file

    def _store(
        self,
        account: Account,
        outputs: Sequence[TransformOutput],
        operation: str,
    ) -> list[DocumentRecord]:
        self._quota.admit(account, sum(len(output.data) for output in outputs))
        records: list[DocumentRecord] = []
        staged_keys: list[str] = []
        try:
            for output in outputs:
                record = self._create_pending(account, output, operation)
                records.append(record)
                self._doc_repo.update_status(record.id, STATUS_PROCESSING)
                self._storage.put(record.storage_key, output.data, PDF_MIME_TYPE)
                staged_keys.append(record.storage_key)
            for record in records:
                self._doc_repo.update_status(record.id, STATUS_COMPLETED)
                record.status = STATUS_COMPLETED
        except BaseException as exc:
            self._discard(staged_keys, records, exc)
            raise
        Log.info(
            f"Stored {len(records)} document(s) from {operation} for account {account.id}"
        )
        return records

    def _create_pending(
        self,
        account: Account,
        output: TransformOutput,
        operation: str,
    ) -> DocumentRecord:
        info = self._inspector.inspect(output.data)
        document_id = str(uuid.uuid4())
        safe_name = secure_filename(output.original_name) or "document.pdf"
        key = document_storage_key(account.id, document_id, safe_name)
        now = self._clock()
        return self._doc_repo.create(
            DocumentRecord(
                id=document_id,
                owner_id=account.id,
                original_name=output.original_name,
                stored_name=key.rsplit("/", 1)[-1],
                storage_key=key,
                size_bytes=len(output.data),
                page_count=info.page_count,
                mime_type=PDF_MIME_TYPE,
                metadata=info.metadata,
                tags=[operation],
                created_at=now,
                expires_at=now + self._document_ttl,
            )
        )

    def _discard(
        self,
        staged_keys: Sequence[str],
        records: Sequence[DocumentRecord],
        exc: BaseException,
    ) -> None:
        """Single best-effort cleanup attempt; failures are logged, not raised."""
        message = str(exc) or type(exc).__name__
        for key in staged_keys:
            try:
                self._storage.delete(key)
            except Exception as cleanup_exc:
                Log.error(f"Could not remove staged blob {key}: {cleanup_exc}")
        for record in records:
            try:
                self._doc_repo.update_status(record.id, STATUS_FAILED, message)
            except Exception as cleanup_exc:
                Log.error(f"Could not mark document {record.id} failed: {cleanup_exc}")
            record.status = STATUS_FAILED
            record.error_message = message
        Log.error(f"Discarded {len(staged_keys)} staged blob(s) after failure: {message}")
