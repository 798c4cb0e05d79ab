"""
hydrofill.report - Statistics tables and text reports for a regression analysis
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from hydrofill.core import MONTH_LABELS, Transformation
from hydrofill.regression.analysis import RegressionAnalysis

log = logging.getLogger(__name__)

STATISTICS_COLUMNS = (
    "N1",
    "MeanX1",
    "SX1",
    "N2",
    "MeanX2",
    "SX2",
    "MeanY1",
    "SY1",
    "NY",
    "MeanY",
    "SY",
    "a",
    "b",
    "R",
    "R2",
    "MeanY1est",
    "SY1est",
    "RMSE",
    "RMSEOriginal",
    "SEE",
    "SESlope",
    "TestScore",
    "TestQuantile",
    "TestRelated",
    "NYfilled",
    "MeanYfilled",
    "SYfilled",
    "SkewYfilled",
)


def _num(value: Optional[float]) -> float:
    return np.nan if value is None else float(value)


def _equation_name(month: Optional[int]) -> str:
    return "Single" if month is None else MONTH_LABELS[month - 1]


def _scope_row(analysis: RegressionAnalysis, month: Optional[int]) -> Dict[str, object]:
    rel = analysis.result_set.get(month)
    row: Dict[str, object] = {
        "N1": rel.n1,
        "MeanX1": _num(rel.x1_stats.mean),
        "SX1": _num(rel.x1_stats.std),
        "N2": rel.n2,
        "MeanX2": _num(rel.x2_stats.mean),
        "SX2": _num(rel.x2_stats.std),
        "MeanY1": _num(rel.y1_stats.mean),
        "SY1": _num(rel.y1_stats.std),
        "NY": rel.y3_stats.n,
        "MeanY": _num(rel.y3_stats.mean),
        "SY": _num(rel.y3_stats.std),
        "a": _num(rel.intercept),
        "b": _num(rel.slope),
        "R": _num(rel.r),
        "R2": _num(rel.r_squared),
    }

    errors = analysis.error_set.get(month) if analysis.error_set is not None else None
    row.update(
        MeanY1est=_num(errors.mean_y1_estimated) if errors else np.nan,
        SY1est=_num(errors.std_y1_estimated) if errors else np.nan,
        RMSE=_num(errors.rmse) if errors else np.nan,
        RMSEOriginal=_num(errors.rmse_original) if errors else np.nan,
        SEE=_num(errors.see) if errors else np.nan,
        SESlope=_num(errors.se_slope) if errors else np.nan,
    )

    check = analysis.check_set.get(month) if analysis.check_set is not None else None
    row.update(
        TestScore=_num(check.test_score) if check else np.nan,
        TestQuantile=_num(check.test_quantile) if check else np.nan,
        TestRelated=(check.confidence_ok if check and check.test_score is not None else None),
    )

    filled = None
    fv = analysis.filled_values
    if fv is not None and ((month is None and fv.has_single) or (month is not None and fv.has_monthly)):
        filled = fv.get(month)
    row.update(
        NYfilled=filled.n if filled else 0,
        MeanYfilled=_num(filled.stats.mean) if filled else np.nan,
        SYfilled=_num(filled.stats.std) if filled else np.nan,
        SkewYfilled=_num(filled.skew) if filled else np.nan,
    )
    return row


def statistics_table(analysis: RegressionAnalysis) -> pd.DataFrame:
    """
    One row per analysed equation with the fit, error, check and fill statistics.

    Relationships are fitted first if the analysis has not done so.  Columns
    for stages that have not run (errors, checks, filling) are NaN.  Sample
    and fit statistics are in transformed units.

    Parameters
    ----------
    analysis : RegressionAnalysis

    Returns
    -------
    pd.DataFrame
        Indexed by equation name (``Single``, ``Jan`` .. ``Dec``), columns
        :data:`STATISTICS_COLUMNS`.
    """
    if analysis.result_set is None:
        analysis.calculate_relationships()
    names: List[str] = []
    rows: List[Dict[str, object]] = []
    for month, _ in analysis.result_set.items():
        names.append(_equation_name(month))
        rows.append(_scope_row(analysis, month))
    df = pd.DataFrame(rows, index=pd.Index(names, name="Equation"), columns=list(STATISTICS_COLUMNS))
    return df


def save_statistics_csv(analysis: RegressionAnalysis, path: str) -> pd.DataFrame:
    """Write :func:`statistics_table` to *path* as CSV and return the table."""
    df = statistics_table(analysis)
    df.to_csv(path)
    log.info("Wrote regression statistics to %s", path)
    return df


def format_report(analysis: RegressionAnalysis) -> str:
    """Markdown summary of the configuration and each relationship."""
    cfg = analysis.config
    y_name = getattr(analysis.dependent, "name", "Y")
    x_name = getattr(analysis.independent, "name", "X")
    df = statistics_table(analysis)

    def period_str(period) -> str:
        if period is None:
            return "N/A"
        return f"{period[0]:%Y-%m-%d} to {period[1]:%Y-%m-%d}"

    transform = "Log10" if cfg.transform == Transformation.LOG10 else "None"
    report = f"""# Regression Analysis Report

**Report Date:** {datetime.now().strftime('%B %d, %Y')}

| Parameter | Value |
|-----------|-------|
| Dependent (Y) | {y_name} |
| Independent (X) | {x_name} |
| Method | {cfg.method.name} |
| Transformation | {transform} |
| Dependent Analysis Period | {period_str(analysis.dependent_period)} |
| Independent Analysis Period | {period_str(analysis.independent_period)} |
| Analysis Months | {", ".join(str(m) for m in cfg.analysis_months) or "All"} |
"""
    if cfg.forced_intercept is not None:
        report += f"| Intercept | {cfg.forced_intercept:g} |\n"

    report += """
## Relationships

| Equation | N1 | N2 | a | b | R | RMSE | SEE | Checks |
|----------|----|----|---|---|---|------|-----|--------|
"""
    for name, row in df.iterrows():
        month = None if name == "Single" else MONTH_LABELS.index(name) + 1
        status = "-"
        if analysis.check_set is not None:
            check = analysis.check_set.get(month)
            status = "Pass" if check.passed else check.invalid_reason()
        cells = [
            f"{row[c]:.4f}" if pd.notna(row[c]) else "-" for c in ("a", "b", "R", "RMSE", "SEE")
        ]
        report += f"| {name} | {int(row['N1'])} | {int(row['N2'])} | " + " | ".join(cells) + f" | {status} |\n"

    if analysis.filled_values is not None:
        report += f"\n**Values filled:** {analysis.filled_values.n_filled}\n"
    return report


def save_report(analysis: RegressionAnalysis, output_path: str) -> None:
    """Save :func:`format_report` to a markdown file."""
    with open(output_path, "w") as f:
        f.write(format_report(analysis))
