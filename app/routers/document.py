import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.core.config import settings
from app.dependencies.auth import get_actor
from app.models.document import StoredDocument
from app.schemas.document import DocumentResponse, DocumentUpdate, DocumentVerifyResponse, CleanupResponse
from app.services.activity import log_activity
from app.services.documents import sanitize_filename, decode_header_filename, content_disposition
from app.services.reports import epoch_millis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])


async def _get_document(document_id: UUID) -> StoredDocument:
    doc = await StoredDocument.get(document_id)
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    return doc


def _file_response(doc: StoredDocument, inline: bool) -> Response:
    if not doc.data:
        logger.warning("Download: missing content for document %s (%s)", doc.name, doc.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File content not present or invalid. Try re-uploading the file."
        )

    filename = sanitize_filename(doc.name or f"file-{doc.id}")
    return Response(
        content=doc.data,
        media_type=doc.content_type or "application/octet-stream",
        headers={
            "Content-Disposition": content_disposition(filename, inline=inline),
            "Content-Length": str(len(doc.data)),
            "Cache-Control": "no-transform",
        },
    )


# ==========================================
# 1. UPLOAD (raw request body)
# ==========================================
@router.post("/documents", response_model=List[DocumentResponse], status_code=status.HTTP_201_CREATED)
async def upload_document(request: Request):
    """
    Store the raw request body as a document.

    The file name comes from the URL-encoded ``X-File-Name`` header and the
    uploader from ``X-Username``. The response is a one-element list.
    """
    data = await request.body()

    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file content received or file is empty. Ensure client sends raw bytes and 'X-File-Name' header."
        )

    if len(data) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.MAX_UPLOAD_MB} MB upload limit"
        )

    headers = request.headers
    content_type = (headers.get("content-type") or "application/octet-stream").split(";")[0].strip()
    filename = (
        decode_header_filename(headers.get("x-file-name") or headers.get("x-filename"))
        or f"file_{epoch_millis(datetime.utcnow())}"
    )
    username = headers.get("x-username") or "Unknown"

    doc = StoredDocument(
        name=filename,
        size=len(data),
        date=datetime.utcnow(),
        data=data,
        content_type=content_type or "application/octet-stream",
        uploaded_by=username
    )
    await doc.insert()

    logger.info("Upload: saved %s size=%s bytes by user=%s", doc.name, doc.size, username)
    await log_activity(username, f"Uploaded document: {doc.name} ({doc.content_type})")
    return [doc]


# ==========================================
# 2. LIST, UPDATE, DELETE
# ==========================================
@router.get("/documents", response_model=List[DocumentResponse])
async def list_documents(folder: Optional[str] = None, report_type: Optional[str] = None):
    filters = {}
    if folder:
        filters["folder"] = folder
    if report_type:
        filters["report_type"] = report_type

    return await StoredDocument.find(filters).sort(-StoredDocument.date).to_list()


@router.put("/documents/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    actor: str = Depends(get_actor)
):
    doc = await _get_document(document_id)

    changes = data.model_dump(exclude_unset=True)
    # name and tags are required on the record; only folder may be cleared
    for field in ("name", "tags"):
        if field in changes and changes[field] is None:
            del changes[field]

    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update"
        )

    await doc.update({"$set": changes})
    doc = await _get_document(document_id)

    await log_activity(actor, f"Updated document: {doc.name}")
    return doc


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_document(
    document_id: UUID,
    actor: str = Depends(get_actor)
):
    doc = await _get_document(document_id)
    await doc.delete()

    logger.info("Deleted doc %s (%s)", doc.name, doc.id)
    await log_activity(actor, f"Deleted document: {doc.name}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/documents/{document_id}/verify", response_model=DocumentVerifyResponse)
async def verify_document(document_id: UUID):
    """Compare the recorded size with the bytes actually stored."""
    doc = await _get_document(document_id)
    actual = len(doc.data or b"")

    return {
        "id": doc.id,
        "name": doc.name,
        "stored_size": doc.size,
        "actual_data_length": actual,
        "has_data": actual > 0,
        "valid": actual > 0 and actual == doc.size,
        "content_type": doc.content_type,
        "date": doc.date,
    }


# ==========================================
# 3. DOWNLOAD
# ==========================================
@router.get("/documents/download/{document_id}")
async def download_document(
    document_id: UUID,
    inline: Optional[str] = None,
    actor: str = Depends(get_actor)
):
    doc = await _get_document(document_id)
    response = _file_response(doc, inline == "1")

    logger.info("Download: %s size=%s bytes", doc.name, len(doc.data))
    await log_activity(actor, f"Downloaded document: {sanitize_filename(doc.name)}")
    return response


@router.get("/documents/download/name/{name}")
async def download_document_by_name(
    name: str,
    inline: Optional[str] = None,
    actor: str = Depends(get_actor)
):
    doc = await StoredDocument.find_one(StoredDocument.name == name)
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found by name"
        )

    response = _file_response(doc, inline == "1")

    logger.info("Download by name: %s size=%s bytes", doc.name, len(doc.data))
    await log_activity(actor, f"Downloaded document by name: {sanitize_filename(doc.name)}")
    return response


# ==========================================
# 4. CLEANUP
# ==========================================
@router.delete("/cleanup-documents", response_model=CleanupResponse)
async def cleanup_documents(actor: str = Depends(get_actor)):
    """Remove documents whose bytes are missing or do not match the recorded size."""
    deleted = 0
    for doc in await StoredDocument.find_all().to_list():
        actual = len(doc.data or b"")
        if actual == 0 or actual != doc.size:
            await doc.delete()
            deleted += 1

    logger.info("Cleanup removed %s corrupted documents", deleted)
    await log_activity(actor, f"Cleaned up {deleted} corrupted documents")
    return {"success": True, "deleted_count": deleted}
