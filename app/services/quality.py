"""Quality score calculator: produces a 0-100 composite score."""

from typing import Any, Dict, List, Sequence

from app.services.coercion import CellKind, classify_cell


def calculate_quality_score(rows: List[Dict[str, Any]], columns: Sequence[str]) -> float:
    """
    Composite quality score (0–100) over the given columns:

    Completeness  60%: % of cells holding a value
    Consistency   40%: % of columns whose values are all one kind
    """
    if not rows or not columns:
        return 0.0

    total_cells = len(rows) * len(columns)

    # ── Completeness ─────────────────────────────────────────────────
    absent_cells = 0
    consistent_cols = 0
    for col in columns:
        kinds = set()
        for row in rows:
            kind = classify_cell(row.get(col))
            if kind == CellKind.ABSENT:
                absent_cells += 1
            else:
                kinds.add(kind)
        # ── Consistency ──────────────────────────────────────────────
        if len(kinds) <= 1:
            consistent_cols += 1

    completeness = (total_cells - absent_cells) / total_cells * 100
    consistency = consistent_cols / len(columns) * 100

    # ── Composite ────────────────────────────────────────────────────
    score = completeness * 0.60 + consistency * 0.40

    return round(min(max(score, 0.0), 100.0), 2)
