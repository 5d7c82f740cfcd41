"""CLI entry point for Markdown report generation."""

import os
import sys
from pathlib import Path

from portfolio_projection.charts import plot_projection
from portfolio_projection.cli import EXIT_NOT_CONVERGED, report_not_converged
from portfolio_projection.config import parse_args
from portfolio_projection.projection import project
from portfolio_projection.report import render_report


def _add_args(parser):
    parser.add_argument(
        "--name", type=str, default="",
        help="output filename suffix (e.g. base → report-base.md)",
    )
    parser.add_argument(
        "--output", type=Path, default=Path("reports"),
        help="report output directory (default: reports)",
    )
    parser.add_argument(
        "--chart-dir", type=Path, default=Path("reports/charts"),
        help="chart output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--no-chart", action="store_true",
        help="skip the chart (table only)",
    )


def main(argv: list[str] | None = None) -> int:
    params, max_years, args = parse_args("Financial projection report", _add_args, argv)

    suffix = f"-{args.name}" if args.name else ""
    out_path = args.output / f"report{suffix}.md"
    print(f"Generating report → {out_path}", file=sys.stderr)

    result = project(params, max_years=max_years)

    chart_link = None
    if not args.no_chart:
        chart_path = plot_projection(
            result, args.chart_dir, name=args.name, target_value=params.target_value,
        )
        print(f"  → {chart_path}", file=sys.stderr)
        # Link relative to the report so the Markdown renders from any cwd
        chart_link = Path(os.path.relpath(chart_path, args.output))

    md = render_report(params, result, chart_path=chart_link)
    args.output.mkdir(parents=True, exist_ok=True)
    out_path.write_text(md, encoding="utf-8")
    print(f"  → {out_path}", file=sys.stderr)

    if not result.converged:
        report_not_converged(result)
        return EXIT_NOT_CONVERGED
    print("done", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
