import io

from flask import Blueprint, current_app, request, send_file
from werkzeug.datastructures import FileStorage

from pdfhub.api.responses import success
from pdfhub.api.schemas import (
    CompressRequest,
    RotateRequest,
    SplitRequest,
    WatermarkRequest,
    parse_id,
    parse_request,
)
from pdfhub.api.security import auth_required, current_account, get_services
from pdfhub.documents.models import UploadedFile

bp = Blueprint("documents", __name__, url_prefix="/documents")


@bp.post("/upload")
@auth_required
def upload():
    record = get_services().documents.upload(current_account(), _single_file("file"))
    return success(record.to_public_dict(), 201)


@bp.post("/merge")
@auth_required
def merge():
    files = [_read_file(f) for f in request.files.getlist("files") if f.filename]
    record = get_services().documents.merge(current_account(), files)
    return success(record.to_public_dict())


@bp.post("/split")
@auth_required
def split():
    body = parse_request(SplitRequest, _form_payload())
    records = get_services().documents.split(current_account(), _single_file("file"), body.pages)
    return success([r.to_public_dict() for r in records])


@bp.post("/compress")
@auth_required
def compress():
    body = parse_request(CompressRequest, _form_payload())
    record = get_services().documents.compress(
        current_account(), _single_file("file"), body.image_quality
    )
    return success(record.to_public_dict())


@bp.post("/watermark")
@auth_required
def watermark():
    body = parse_request(WatermarkRequest, _form_payload())
    record = get_services().documents.watermark(
        current_account(), _single_file("file"), body.text, body.font_size, body.angle
    )
    return success(record.to_public_dict())


@bp.post("/rotate")
@auth_required
def rotate():
    body = parse_request(RotateRequest, _form_payload())
    record = get_services().documents.rotate(
        current_account(), _single_file("file"), body.pages, body.angle
    )
    return success(record.to_public_dict())


@bp.get("")
@auth_required
def list_documents():
    records = get_services().documents.list_documents(current_account())
    return success([r.to_public_dict() for r in records])


@bp.get("/usage")
@auth_required
def usage():
    return success(get_services().quota.summary(current_account()).to_dict())


@bp.get("/<document_id>")
@auth_required
def get_document(document_id: str):
    record = get_services().documents.get_document(current_account(), _checked_id(document_id))
    return success(record.to_public_dict())


@bp.get("/<document_id>/download")
@auth_required
def download(document_id: str):
    record, data = get_services().documents.download(current_account(), _checked_id(document_id))
    return send_file(
        io.BytesIO(data),
        mimetype=record.mime_type,
        as_attachment=True,
        download_name=record.original_name,
    )


@bp.delete("/<document_id>")
@auth_required
def delete_document(document_id: str):
    get_services().documents.delete_document(current_account(), _checked_id(document_id))
    return success(message="PDF deleted successfully")


def _checked_id(document_id: str) -> str:
    return parse_id(document_id, "PDF not found")


def _single_file(field: str) -> UploadedFile | None:
    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    return _read_file(storage)


def _read_file(storage: FileStorage) -> UploadedFile:
    # one byte past the limit is enough for the size check to reject it
    limit = current_app.config["PDFHUB_MAX_UPLOAD_BYTES"]
    return UploadedFile(
        filename=storage.filename or "",
        content_type=storage.mimetype,
        data=storage.stream.read(limit + 1),
    )


def _form_payload() -> dict[str, object]:
    """Form fields as a dict; repeated fields (e.g. pages=1&pages=2) become lists."""
    payload: dict[str, object] = {}
    for key in request.form:
        values = request.form.getlist(key)
        payload[key] = values if len(values) > 1 else values[0]
    return payload
