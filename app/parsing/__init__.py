from .errors import UnreadableDocument
from .models import ParsedDoc
from .parse import extract_text, normalize_extracted_text, parse_resume_document

__all__ = [
    "UnreadableDocument",
    "ParsedDoc",
    "extract_text",
    "normalize_extracted_text",
    "parse_resume_document",
]
