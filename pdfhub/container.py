from dataclasses import dataclass
from datetime import timedelta

from pdfhub.config.settings import Settings
from pdfhub.database.connection import Database
from pdfhub.database.repositories.account_repository import AccountRepository
from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.documents.service import DocumentService
from pdfhub.documents.sweeper import ExpirySweeper
from pdfhub.identity.notifier import LoggingResetTokenNotifier
from pdfhub.identity.providers.factory import IdentityProviderFactory
from pdfhub.identity.service import IdentityService
from pdfhub.identity.tokens import SessionTokens
from pdfhub.pdf.factory import PdfInspectorFactory
from pdfhub.quota.ledger import QuotaLedger
from pdfhub.storage.factory import BlobStorageFactory
from pdfhub.transform.pymupdf_transformer import PyMuPdfTransformer


@dataclass
class Services:
    """Long-lived service handles shared by every request."""

    identity: IdentityService
    documents: DocumentService
    quota: QuotaLedger
    sweeper: ExpirySweeper


def build_services(settings: Settings, db: Database) -> Services:
    """Build every service with its adapters from settings."""
    account_repo = AccountRepository(db)
    doc_repo = DocumentRepository(db)
    storage = BlobStorageFactory.create(settings)
    quota = QuotaLedger(doc_repo, settings.default_storage_limit_bytes)
    identity = IdentityService(
        account_repo,
        SessionTokens(timedelta(hours=settings.session_ttl_hours)),
        LoggingResetTokenNotifier(),
        providers=IdentityProviderFactory.create_all(settings),
        reset_token_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
        default_storage_limit_bytes=settings.default_storage_limit_bytes,
    )
    documents = DocumentService(
        doc_repo,
        storage,
        PyMuPdfTransformer(),
        PdfInspectorFactory.create(settings),
        quota,
        max_upload_bytes=settings.max_upload_bytes,
        max_merge_files=settings.max_merge_files,
        document_ttl=timedelta(days=settings.document_ttl_days),
    )
    sweeper = ExpirySweeper(
        doc_repo,
        storage,
        batch_size=settings.sweep_batch_size,
        interval_seconds=settings.sweep_interval_seconds,
    )
    return Services(identity=identity, documents=documents, quota=quota, sweeper=sweeper)
