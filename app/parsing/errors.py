from __future__ import annotations


class UnreadableDocument(ValueError):
    """The uploaded payload is not a PDF with an extractable text layer."""
