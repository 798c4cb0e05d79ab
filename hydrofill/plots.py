"""
hydrofill.plots - Scatter plots of regression relationships
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from hydrofill import transforms
from hydrofill.core import MONTH_LABELS, MONTHS, Transformation
from hydrofill.regression.analysis import RegressionAnalysis
from hydrofill.regression.data_set import RegressionSample
from hydrofill.regression.solver import RegressionRelationship


def apply_regression_style():
    """Apply standard plotting style."""
    plt.rcParams.update({
        "figure.dpi": 140,
        "figure.facecolor": "white",
        "axes.facecolor": "white",
        "axes.grid": True,
        "grid.alpha": 0.3,
        "font.size": 10,
    })


def _draw_relationship(ax, sample: RegressionSample, relationship: RegressionRelationship, annotate: bool = True):
    """Scatter the paired sample and overlay the fitted line, in data units."""
    log_axes = relationship.transform == Transformation.LOG10
    x1 = np.asarray(sample.x1)
    y1 = np.asarray(sample.y1)
    if log_axes:
        # Non-positive values cannot be shown on log axes
        keep = (x1 > 0) & (y1 > 0)
        x1, y1 = x1[keep], y1[keep]
    ax.scatter(x1, y1, s=18, c="blue", edgecolors="darkblue", linewidth=0.5, zorder=5, label="Paired data")

    if relationship.is_defined and len(x1) > 0:
        if log_axes:
            xs = np.logspace(np.log10(x1.min()), np.log10(x1.max()), 50)
        else:
            xs = np.linspace(x1.min(), x1.max(), 50)
        x_t = transforms.apply(xs, relationship.transform, relationship.le_zero_substitute)
        ys = transforms.invert(relationship.estimate_transformed(x_t), relationship.transform)
        ax.plot(xs, ys, "r-", linewidth=1.5, zorder=4, label=relationship.method.name)

    if log_axes:
        ax.set_xscale("log")
        ax.set_yscale("log")

    if annotate:
        if relationship.is_defined:
            text = (
                f"N1 = {relationship.n1}\n"
                f"a = {relationship.intercept:.4g}\n"
                f"b = {relationship.slope:.4g}\n"
                f"R = {relationship.r:.3f}"
            )
        else:
            text = f"N1 = {relationship.n1}\nundefined"
        ax.annotate(
            text,
            xy=(0.02, 0.98),
            xycoords="axes fraction",
            fontsize=8,
            ha="left",
            va="top",
            family="monospace",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.9),
        )


def plot_relationship(
    analysis: RegressionAnalysis,
    month: Optional[int] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    figsize: tuple = (8, 6),
) -> plt.Figure:
    """
    Plot the paired sample and fitted line for one equation.

    Parameters
    ----------
    analysis : RegressionAnalysis
        Relationships are fitted first if needed.
    month : int, optional
        Month 1-12 of a monthly equation; None for the single equation.
    title : str, optional
        Plot title
    save_path : str, optional
        Path to save figure
    figsize : tuple
        Figure size

    Returns
    -------
    plt.Figure
        Matplotlib figure
    """
    apply_regression_style()
    if analysis.result_set is None:
        analysis.calculate_relationships()
    relationship = analysis.result_set.get(month)
    sample = analysis.data_set.get(month)

    fig, ax = plt.subplots(figsize=figsize)
    _draw_relationship(ax, sample, relationship)

    ax.set_xlabel(f"{getattr(analysis.independent, 'name', 'X')} (X)", fontsize=11)
    ax.set_ylabel(f"{getattr(analysis.dependent, 'name', 'Y')} (Y)", fontsize=11)
    if title is None:
        title = f"Regression Relationship ({relationship.scope_label})"
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.legend(loc="lower right", fontsize=9)
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches="tight")

    return fig


def plot_monthly_relationships(
    analysis: RegressionAnalysis,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    figsize: tuple = (14, 10),
) -> plt.Figure:
    """
    Plot the twelve monthly relationships on a 3 x 4 grid.

    Raises
    ------
    KeyError
        If monthly equations were not analysed.
    """
    apply_regression_style()
    if analysis.result_set is None:
        analysis.calculate_relationships()
    if not analysis.result_set.has_monthly:
        raise KeyError("Monthly equations were not analyzed")

    fig, axes = plt.subplots(3, 4, figsize=figsize)
    for month, ax in zip(MONTHS, axes.flat):
        _draw_relationship(ax, analysis.data_set.get(month), analysis.result_set.get(month))
        ax.set_title(MONTH_LABELS[month - 1], fontsize=10)

    fig.suptitle(title or "Monthly Regression Relationships", fontsize=12, fontweight="bold")
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches="tight")

    return fig
