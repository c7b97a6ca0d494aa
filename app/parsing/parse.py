from __future__ import annotations

import hashlib
import logging
import re
from io import BytesIO

from pypdf import PdfReader

from .errors import UnreadableDocument
from .models import ParsedDoc

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
# PDF readers accept junk before the header as long as it sits within the first 1 KiB.
_HEADER_SCAN_BYTES = 1024
_PDF_MIME_TYPES = {"application/pdf", "application/x-pdf", "application/octet-stream"}
_INLINE_WHITESPACE_RE = re.compile(r"[^\S\n]+")


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def normalize_extracted_text(text: str) -> str:
    """Collapse inline whitespace and keep single blank lines as paragraph breaks."""
    lines: list[str] = []
    previous_blank = True
    for raw_line in (text or "").splitlines():
        line = _INLINE_WHITESPACE_RE.sub(" ", raw_line).strip()
        if not line:
            if not previous_blank:
                lines.append("")
            previous_blank = True
            continue
        lines.append(line)
        previous_blank = False
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _open_reader(content: bytes) -> PdfReader:
    if not content:
        raise UnreadableDocument("The uploaded file is empty.")
    if PDF_MAGIC not in content[:_HEADER_SCAN_BYTES]:
        raise UnreadableDocument("File signature does not match .pdf content.")

    try:
        reader = PdfReader(BytesIO(content))
        encrypted = reader.is_encrypted
    except Exception as exc:  # noqa: BLE001 - malformed files surface as arbitrary parser errors
        raise UnreadableDocument("Unable to read this PDF file.") from exc

    if encrypted:
        try:
            decrypted = reader.decrypt("")
        except Exception as exc:  # noqa: BLE001 - pypdf raises several types for unsupported ciphers
            raise UnreadableDocument("This PDF is encrypted and cannot be read.") from exc
        if not decrypted:
            raise UnreadableDocument("This PDF is password protected.")
    return reader


def _extract_pdf(content: bytes) -> tuple[str, int, list[str]]:
    reader = _open_reader(content)
    warnings: list[str] = []
    page_chunks: list[str] = []

    try:
        pages = list(reader.pages)
    except Exception as exc:  # noqa: BLE001 - a broken page tree is an unreadable document
        raise UnreadableDocument("Unable to read the pages of this PDF file.") from exc

    for index, page in enumerate(pages, start=1):
        try:
            page_text = page.extract_text() or ""
        except Exception as exc:  # noqa: BLE001 - one broken page should not drop the rest
            logger.warning("pdf_page_extract_failed page=%s: %s", index, exc)
            warnings.append(f"Text extraction failed on page {index}.")
            continue
        if page_text.strip():
            page_chunks.append(page_text)
        else:
            warnings.append(f"No extractable text on page {index}.")

    text = normalize_extracted_text("\n\n".join(page_chunks))
    if not text:
        raise UnreadableDocument(
            "No extractable text found in PDF. Scanned resumes need a text layer."
        )
    return text, len(pages), warnings


def extract_text(content: bytes) -> str:
    """Return whitespace-normalized text from PDF bytes.

    Raises UnreadableDocument when the payload is not a parseable PDF or has no
    text layer. Empty text is never returned.
    """
    text, _page_count, _warnings = _extract_pdf(bytes(content))
    return text


def parse_resume_document(
    content: bytes,
    filename: str = "resume.pdf",
    declared_mime_type: str | None = None,
) -> ParsedDoc:
    name = (filename or "").strip() or "resume.pdf"
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if extension and extension != "pdf":
        raise UnreadableDocument(f"Unsupported file type '.{extension}'. Only PDF resumes are supported.")

    mime_type = (declared_mime_type or "").split(";")[0].strip().lower()
    if mime_type and mime_type not in _PDF_MIME_TYPES:
        raise UnreadableDocument(f"Unsupported content type '{mime_type}'. Only PDF resumes are supported.")

    text, page_count, warnings = _extract_pdf(bytes(content))
    logger.info("resume_pdf_parsed pages=%s chars=%s warnings=%s", page_count, len(text), len(warnings))
    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=name),
        source_type="pdf",
        filename=name,
        text=text,
        page_count=page_count,
        parsing_warnings=warnings,
    )
