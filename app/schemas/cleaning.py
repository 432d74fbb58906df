from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class ColumnProfileSchema(BaseModel):
    name: str
    type: str   # 'numeric' | 'boolean' | 'datetime' | 'categorical' | 'text' (others pass through)


class DatasetProfileSchema(BaseModel):
    columns: list[ColumnProfileSchema] = []

    @field_validator("columns")
    @classmethod
    def unique_names(cls, columns: list[ColumnProfileSchema]) -> list[ColumnProfileSchema]:
        seen = set()
        for col in columns:
            if col.name in seen:
                raise ValueError(f"Duplicate column '{col.name}' in profile")
            seen.add(col.name)
        return columns


class CleanRequest(BaseModel):
    rows: list[dict[str, Any]]
    profile: DatasetProfileSchema


class AuditLogEntry(BaseModel):
    row_index: Optional[int]
    column_name: Optional[str]
    action: str
    original_value: Optional[str]
    new_value: Optional[str]
    reason: str
    was_auto_applied: bool
    timestamp: datetime

    model_config = {"from_attributes": True}


class ReviewFlag(BaseModel):
    row: int
    column: str
    message: str
    value: Any
    severity: str


class CleanResponse(BaseModel):
    rows: list[dict[str, Any]]
    report: list[str]
    row_count: int
    summary: dict[str, int]
    flags: list[ReviewFlag]
    missing_columns: list[str]
    quality_score_before: float
    quality_score_after: float
    audit_trail: Optional[list[AuditLogEntry]] = None


class ColumnTypesResponse(BaseModel):
    supported: list[str]
