from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

SourceFormat = Literal["pdf", "docx"]


class ExtractedDocument(BaseModel):
    raw_text: str
    source_format: SourceFormat
    length: int
    truncated: bool = False

    @field_validator("source_format", mode="before")
    @classmethod
    def _validate_source_format(cls, value: str) -> str:
        return str(value).strip().lower().lstrip(".")
