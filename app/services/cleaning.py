"""
DataCleaner: 2-phase, profile-driven column cleaning.

The column profile (name + semantic type) is trusted input produced by the
profiling step; this module never infers types.

Phase 1: Summarize  (one fill value per column, computed from raw rows only)
Phase 2: Transform  (coerce, impute, clip/normalise every cell of the column)

Numeric      → to_number, impute median, winsorize
Datetime     → normalize_date, unparseable values kept verbatim
Boolean      → normalize_boolean, impute mode
Categorical  → trim, impute mode (or "Unknown")
Text         → same as categorical

Columns with any other type are passed through untouched and get no
report line.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from app.config import Settings, get_settings
from app.services.coercion import is_blank, normalize_boolean, normalize_date, to_number, to_text
from app.services.outliers import winsorize
from app.services.summary_stats import mode, quantiles


Row = Dict[str, Any]

NUMERIC = "numeric"
BOOLEAN = "boolean"
DATETIME = "datetime"
CATEGORICAL = "categorical"
TEXT = "text"

SUPPORTED_TYPES = (NUMERIC, BOOLEAN, DATETIME, CATEGORICAL, TEXT)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class ColumnDescriptor:
    name: str
    type: str


@dataclass
class DatasetProfile:
    """Ordered column descriptors; the order drives the report order."""
    columns: List[ColumnDescriptor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatasetProfile":
        return cls(columns=[
            ColumnDescriptor(name=c["name"], type=c["type"])
            for c in data.get("columns", [])
        ])

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.columns]


@dataclass
class CleaningLogEntry:
    """One audited cleaning action (column-level when row_index is None)."""
    action: str
    reason: str
    column_name: Optional[str] = None
    row_index: Optional[int] = None
    original_value: Optional[str] = None
    new_value: Optional[str] = None
    was_auto_applied: bool = True
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass
class CleaningResult:
    rows: List[Row]
    report: List[str]
    summary: Dict[str, int] = field(default_factory=dict)
    audit_log: List[CleaningLogEntry] = field(default_factory=list)
    flags: List[Dict[str, Any]] = field(default_factory=list)


# ============================================================================
# HELPERS
# ============================================================================

def _clean_text(value: Any) -> Optional[str]:
    """Trimmed text form of a cell, or None when it holds nothing."""
    if is_blank(value):
        return None
    text = to_text(value).strip()
    return text or None


def missing_columns(rows: Iterable[Row], profile: DatasetProfile) -> List[str]:
    """Profiled columns that appear in none of the rows."""
    seen = set()
    for row in rows:
        seen.update(row.keys())
    return [name for name in profile.names if name not in seen]


# ============================================================================
# CLEANER
# ============================================================================

class DataCleaner:
    def __init__(self, rows: List[Row], profile: DatasetProfile, settings: Optional[Settings] = None):
        self.raw_rows = rows
        self.profile = profile
        self.settings = settings or get_settings()
        # Shallow copies; the caller's row dicts are never written to
        self.rows: List[Row] = [dict(r) for r in rows]
        self.report: List[str] = []
        self.fill_values: Dict[str, Any] = {}
        self.audit_log: List[CleaningLogEntry] = []
        self.flags: List[Dict[str, Any]] = []
        self.summary = {
            "columns_cleaned": 0,
            "columns_skipped": 0,
            "numbers_converted": 0,
            "missing_filled": 0,
            "outliers_clipped": 0,
            "dates_normalized": 0,
            "dates_unparsed": 0,
            "booleans_normalized": 0,
            "text_trimmed": 0,
        }

    # ─────────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────────

    def _log(
        self,
        action: str,
        reason: str,
        column_name: Optional[str] = None,
        row_index: Optional[int] = None,
        original_value: Any = None,
        new_value: Any = None,
        was_auto_applied: bool = True,
    ):
        self.audit_log.append(CleaningLogEntry(
            action=action,
            reason=reason,
            column_name=column_name,
            row_index=row_index,
            original_value=str(original_value) if original_value is not None else None,
            new_value=str(new_value) if new_value is not None else None,
            was_auto_applied=was_auto_applied,
        ))

    def _flag(self, row_idx: int, col: str, message: str, value: Any, severity: str = "warning"):
        """Record a cell for manual review."""
        self.flags.append({
            "row": row_idx,
            "column": col,
            "message": message,
            "value": value,
            "severity": severity,
        })

    def _raw_values(self, col: str) -> List[Any]:
        return [row.get(col) for row in self.raw_rows]

    # ─────────────────────────────────────────────────────────────────
    # PHASE 1: Summarize
    # ─────────────────────────────────────────────────────────────────

    def summarize_numeric(self, col: str) -> Optional[float]:
        numbers = [n for n in map(to_number, self._raw_values(col)) if n is not None]
        if not numbers:
            return None
        return quantiles(numbers).q2

    def summarize_boolean(self, col: str) -> Optional[bool]:
        return mode(b for b in map(normalize_boolean, self._raw_values(col)) if b is not None)

    def summarize_text(self, col: str) -> Optional[str]:
        return mode(t for t in map(_clean_text, self._raw_values(col)) if t is not None)

    def summarize(self) -> Dict[str, Any]:
        """Compute the fill value of every profiled column from the raw rows."""
        summarizers = {
            NUMERIC: self.summarize_numeric,
            BOOLEAN: self.summarize_boolean,
            CATEGORICAL: self.summarize_text,
            TEXT: self.summarize_text,
        }
        for column in self.profile.columns:
            summarizer = summarizers.get(column.type)
            if summarizer is None:
                continue
            fill_value = summarizer(column.name)
            if fill_value is not None:
                self.fill_values[column.name] = fill_value
        return self.fill_values

    # ─────────────────────────────────────────────────────────────────
    # PHASE 2: Transform
    # ─────────────────────────────────────────────────────────────────

    def clean_numeric(self, col: str) -> str:
        """Convert to number, impute the median, then winsorize the column."""
        median = self.fill_values.get(col, self.settings.DEFAULT_NUMERIC_FILL)

        filled = []
        for idx, row in enumerate(self.rows):
            original = row.get(col)
            number = to_number(original)
            if number is None:
                number = median
                self._log(
                    action="fill_missing",
                    reason=f"Missing or non-numeric value filled with median ({median:.4g})",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=median,
                )
                self.summary["missing_filled"] += 1
            elif number is not original:
                self._log(
                    action="convert_number",
                    reason="Text converted to number",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=number,
                )
                self.summary["numbers_converted"] += 1
            filled.append(number)

        clipped = winsorize(
            filled,
            min_samples=self.settings.WINSORIZE_MIN_SAMPLES,
            multiplier=self.settings.WINSORIZE_IQR_MULTIPLIER,
        )

        for idx, (row, before, after) in enumerate(zip(self.rows, filled, clipped)):
            if after != before:
                self._log(
                    action="clip_outlier",
                    reason=f"Value {before} is outside the IQR fence, clipped to {after:.4g}",
                    column_name=col,
                    row_index=idx,
                    original_value=before,
                    new_value=after,
                )
                self.summary["outliers_clipped"] += 1
            row[col] = after

        return f"{col}: converted to number, imputed median {median:.2f}, winsorized outliers"

    def clean_datetime(self, col: str) -> str:
        """Normalise to ISO; values that do not parse are left exactly as they were."""
        for idx, row in enumerate(self.rows):
            original = row.get(col)
            normalized = normalize_date(original)
            if normalized is None:
                row[col] = original
                if not is_blank(original):
                    self._flag(idx, col, "Unparseable date kept as-is", original)
                    self.summary["dates_unparsed"] += 1
                continue

            if normalized != original:
                self._log(
                    action="normalize_date",
                    reason="Date normalised to ISO format",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=normalized,
                )
                self.summary["dates_normalized"] += 1
            row[col] = normalized

        return f"{col}: normalized dates to ISO (YYYY-MM-DD or ISO 8601)"

    def clean_boolean(self, col: str) -> str:
        fill_value = self.fill_values.get(col, self.settings.DEFAULT_BOOLEAN_FILL)

        for idx, row in enumerate(self.rows):
            original = row.get(col)
            value = normalize_boolean(original)
            if value is None:
                value = fill_value
                self._log(
                    action="fill_missing",
                    reason=f"Missing or ambiguous boolean filled with mode ({fill_value})",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=fill_value,
                )
                self.summary["missing_filled"] += 1
            elif value is not original:
                self._log(
                    action="normalize_boolean",
                    reason="Boolean variant standardised",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=value,
                )
                self.summary["booleans_normalized"] += 1
            row[col] = value

        return f"{col}: normalized booleans and filled missing with mode"

    def clean_text(self, col: str) -> str:
        # Whitespace-only cells count as missing and get the fill value, not ""
        fill_value = self.fill_values.get(col, self.settings.DEFAULT_TEXT_FILL)

        for idx, row in enumerate(self.rows):
            original = row.get(col)
            value = _clean_text(original)
            if value is None:
                value = fill_value
                self._log(
                    action="fill_missing",
                    reason=f"Missing value filled with '{fill_value}'",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=fill_value,
                )
                self.summary["missing_filled"] += 1
            elif value != original:
                self._log(
                    action="trim_text",
                    reason="Surrounding whitespace removed",
                    column_name=col,
                    row_index=idx,
                    original_value=original,
                    new_value=value,
                )
                self.summary["text_trimmed"] += 1
            row[col] = value

        return f"{col}: trimmed text and filled missing with '{fill_value}'"

    def transform(self) -> List[str]:
        """Clean every profiled column in profile order; returns the report."""
        cleaners = {
            NUMERIC: self.clean_numeric,
            DATETIME: self.clean_datetime,
            BOOLEAN: self.clean_boolean,
            CATEGORICAL: self.clean_text,
            TEXT: self.clean_text,
        }
        for column in self.profile.columns:
            cleaner = cleaners.get(column.type)
            if cleaner is None:
                self._log(
                    action="skip_column",
                    reason=f"Unsupported column type '{column.type}', left unchanged",
                    column_name=column.name,
                    was_auto_applied=False,
                )
                self.summary["columns_skipped"] += 1
                continue
            self.report.append(cleaner(column.name))
            self.summary["columns_cleaned"] += 1
        return self.report

    # ─────────────────────────────────────────────────────────────────
    # Run full pipeline
    # ─────────────────────────────────────────────────────────────────

    def run_all(self) -> CleaningResult:
        """Execute both phases. Returns the cleaned rows and the report."""
        self.summarize()
        self.transform()
        return CleaningResult(
            rows=self.rows,
            report=self.report,
            summary=self.summary,
            audit_log=self.audit_log,
            flags=self.flags,
        )


def clean_data(rows: List[Row], profile: DatasetProfile, settings: Optional[Settings] = None) -> CleaningResult:
    """Clean ``rows`` according to ``profile``; input rows are not modified."""
    return DataCleaner(rows, profile, settings=settings).run_all()


def clean_dataframe(
    df: pd.DataFrame, profile: DatasetProfile, settings: Optional[Settings] = None
) -> Tuple[pd.DataFrame, List[str]]:
    """Run the cleaner over a DataFrame and return (cleaned_df, report)."""
    records = df.astype(object).to_dict(orient="records")
    result = clean_data(records, profile, settings=settings)
    cleaned = pd.DataFrame(result.rows, index=df.index)
    # Profiled columns missing from df are appended after the original ones
    extra = [name for name in profile.names if name not in df.columns and name in cleaned.columns]
    return cleaned.reindex(columns=list(df.columns) + extra), result.report
