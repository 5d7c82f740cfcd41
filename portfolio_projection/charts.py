"""Chart generation for projection results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from portfolio_projection.projection import ProjectionResult
from portfolio_projection.report import to_crore

SERIES = (
    ("portfolio", "Portfolio Value", "#4bc0c0"),
    ("income", "Annual Income", "#ff6384"),
    ("expenses", "Annual Expenses", "#ffcd56"),
)


def plot_projection(
    result: ProjectionResult, output_path: Path, name: str = "",
    target_value: float | None = None,
) -> Path:
    """Generate a line chart of portfolio, income and expenses in Crore.

    Args:
        result: project() return value.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "base" → "projection-base.png").
        target_value: draw a dashed horizontal line at the target when given.

    Returns:
        Path to the generated PNG file.
    """
    if not len(result):
        raise ValueError("No snapshots to plot")

    fig, ax = plt.subplots(figsize=(12, 7))

    years = [s.year for s in result]
    for key, label, color in SERIES:
        values = [to_crore(getattr(s, key)) for s in result]
        ax.plot(years, values, label=label, color=color, linewidth=2)

    if target_value is not None:
        ax.axhline(
            to_crore(target_value), color="#888888", linewidth=1, linestyle="--",
            label=f"Target ({to_crore(target_value):,.2f} Cr)",
        )

    ax.set_xlabel("Year")
    ax.set_ylabel("Amount (Crores)")
    ax.set_title("Financial Projection Over Time")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    ax.xaxis.set_major_locator(ticker.MaxNLocator(integer=True))
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(lambda x, _: f"{x:,.1f}"))

    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"projection{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath
