from __future__ import annotations

import io

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse
import pandas as pd

from app.config import settings
from app.schemas.cleaning import (
    AuditLogEntry,
    CleanRequest,
    CleanResponse,
    ColumnTypesResponse,
)
from app.services.cleaning import (
    SUPPORTED_TYPES,
    CleaningResult,
    DatasetProfile,
    clean_data,
    missing_columns,
)
from app.services.quality import calculate_quality_score

router = APIRouter(prefix="/cleaning", tags=["cleaning"])


def _to_profile(payload: CleanRequest) -> DatasetProfile:
    return DatasetProfile.from_dict(payload.profile.model_dump())


def _run_or_413(payload: CleanRequest, profile: DatasetProfile) -> CleaningResult:
    if len(payload.rows) > settings.MAX_ROWS:
        raise HTTPException(
            status_code=413,
            detail=f"Too many rows ({len(payload.rows)}); the limit is {settings.MAX_ROWS}.",
        )
    return clean_data(payload.rows, profile)


# ─────────────────────────────────────────────────────────────────────────────
# Supported column types
# ─────────────────────────────────────────────────────────────────────────────

@router.get("/column-types", response_model=ColumnTypesResponse)
def column_types():
    return ColumnTypesResponse(supported=list(SUPPORTED_TYPES))


# ─────────────────────────────────────────────────────────────────────────────
# Clean
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/run", response_model=CleanResponse)
def run_cleaning(
    payload: CleanRequest,
    include_audit: bool = False,
    audit_limit: int = settings.AUDIT_LOG_LIMIT,
):
    profile = _to_profile(payload)
    result = _run_or_413(payload, profile)

    audit_trail = None
    if include_audit:
        audit_trail = [
            AuditLogEntry.model_validate(entry)
            for entry in result.audit_log[:max(audit_limit, 0)]
        ]

    return CleanResponse(
        rows=result.rows,
        report=result.report,
        row_count=len(result.rows),
        summary=result.summary,
        flags=result.flags,
        missing_columns=missing_columns(payload.rows, profile),
        quality_score_before=calculate_quality_score(payload.rows, profile.names),
        quality_score_after=calculate_quality_score(result.rows, profile.names),
        audit_trail=audit_trail,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/export")
def export_csv(payload: CleanRequest):
    result = _run_or_413(payload, _to_profile(payload))

    csv_bytes = pd.DataFrame(result.rows).to_csv(index=False).encode("utf-8")
    return StreamingResponse(
        io.BytesIO(csv_bytes),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="cleaned.csv"'},
    )
