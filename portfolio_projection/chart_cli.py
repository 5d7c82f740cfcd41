"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from portfolio_projection.charts import plot_projection
from portfolio_projection.cli import EXIT_NOT_CONVERGED, report_not_converged
from portfolio_projection.config import parse_args
from portfolio_projection.projection import project


def _add_args(parser):
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="output filename suffix (e.g. base → projection-base.png)",
    )
    parser.add_argument(
        "--show-target", action="store_true",
        help="draw the target value as a dashed line",
    )


def main(argv: list[str] | None = None) -> int:
    params, max_years, args = parse_args("Financial projection chart", _add_args, argv)

    print(f"Projecting (at most {max_years} years)...", file=sys.stderr)
    result = project(params, max_years=max_years)

    path = plot_projection(
        result, args.output, name=args.name,
        target_value=params.target_value if args.show_target else None,
    )
    print(f"  → {path}", file=sys.stderr)

    if not result.converged:
        report_not_converged(result)
        return EXIT_NOT_CONVERGED
    print("done", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
