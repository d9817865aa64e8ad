"""Pydantic model for neutral clause evidence.

Evidence items are produced upstream by clause extraction and carry no
compliance judgement: only the extracted value, a verbatim excerpt and a
confidence. The engine treats them as read-only input.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

MAX_EXCERPT_CHARS = 700


class EvidenceItem(BaseModel):
    """One extracted fact about a clause category for a contract version."""

    clause_category: str = Field(..., description="Clause taxonomy tag")
    value: Any = Field(default=None, description="Structured extracted value, if parsed")
    excerpt: Optional[str] = Field(
        default=None, description="Verbatim quote from the contract"
    )
    confidence: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Extraction confidence (0-1)"
    )
    source_location: Optional[Dict[str, Any]] = Field(
        default=None, description="Page/paragraph hints from the extractor"
    )

    model_config = {"frozen": True}

    @field_validator("clause_category", mode="before")
    @classmethod
    def normalize_clause_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("excerpt")
    @classmethod
    def truncate_excerpt(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > MAX_EXCERPT_CHARS:
            return v[:MAX_EXCERPT_CHARS]
        return v
