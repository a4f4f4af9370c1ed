import logging
import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import HTTPException, status
from fastapi.responses import Response

from app.models.document import StoredDocument
from app.services.activity import log_activity
from app.services.company import get_company_info
from app.services.reports import ReportTable, render_pdf, render_xlsx, report_filename

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_CONTENT_TYPE = "application/pdf"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def sanitize_filename(name: Optional[str]) -> str:
    """Make a name safe for a Content-Disposition header (max 200 chars, tail kept)."""
    if not name:
        return "file"
    cleaned = re.sub(r'[\r\n"]', "", str(name))
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    if not cleaned:
        return "file"
    return cleaned[-200:] if len(cleaned) > 200 else cleaned


def decode_header_filename(raw: Optional[str]) -> Optional[str]:
    """The frontend URL-encodes X-File-Name; plain names pass through."""
    if not raw:
        return None
    return unquote(raw)


def content_disposition(filename: str, inline: bool = False) -> str:
    disposition = "inline" if inline else "attachment"
    # The plain filename= part must stay latin-1 for the header
    ascii_name = filename.encode("ascii", "replace").decode("ascii")
    return f"{disposition}; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


async def store_generated(
    name: str,
    data: bytes,
    content_type: str,
    report_type: Optional[str] = None,
    uploaded_by: str = "System",
) -> StoredDocument:
    """Keep a copy of a generated report in the documents collection."""
    doc = StoredDocument(
        name=name,
        size=len(data),
        date=datetime.utcnow(),
        data=data,
        content_type=content_type,
        folder="Reports" if report_type else None,
        report_type=report_type,
        uploaded_by=uploaded_by,
    )
    await doc.insert()
    return doc


async def send_report(table: ReportTable, file_format: str, actor: str) -> Response:
    """
    Render a report, keep a copy as a document, log it and return it as an
    attachment. Any failure becomes a 500 with a message.
    """
    now = datetime.utcnow()
    try:
        company = await get_company_info()
        if file_format == "pdf":
            data = render_pdf(table, company, printed_by=actor, now=now)
            content_type = PDF_CONTENT_TYPE
        else:
            data = render_xlsx(table, company.name, now=now)
            content_type = XLSX_CONTENT_TYPE

        filename = report_filename(table, file_format, now)
        await store_generated(filename, data, content_type, report_type=table.kind, uploaded_by=actor)
    except Exception:
        logger.exception("%s report (%s) generation failed", table.label, file_format)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Report generation failed"
        )

    await log_activity(actor, f"Generated {table.label} Report {file_format.upper()}: {filename}")
    logger.info("Generated %s (%s bytes) for %s", filename, len(data), actor)

    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": content_disposition(filename)},
    )
