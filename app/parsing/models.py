from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ParsedDoc(BaseModel):
    doc_id: str
    source_type: str
    filename: str = ""
    text: str
    page_count: int = Field(default=0, ge=0)
    parsing_warnings: list[str] = Field(default_factory=list)

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized != "pdf":
            raise ValueError("source_type must be 'pdf'")
        return normalized
