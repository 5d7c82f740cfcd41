"""Portfolio Projection Package."""

from portfolio_projection.params import ProjectionParameters
from portfolio_projection.projection import (
    project,
    round_half_up,
    YearSnapshot,
    ProjectionResult,
    ProjectionDidNotConverge,
    DEFAULT_MAX_YEARS,
)
from portfolio_projection.report import (
    CRORE,
    to_crore,
    fmt_crore,
    render_summary,
    render_table,
    render_report,
)

__all__ = [
    "ProjectionParameters",
    "project",
    "round_half_up",
    "YearSnapshot",
    "ProjectionResult",
    "ProjectionDidNotConverge",
    "DEFAULT_MAX_YEARS",
    "CRORE",
    "to_crore",
    "fmt_crore",
    "render_summary",
    "render_table",
    "render_report",
]
