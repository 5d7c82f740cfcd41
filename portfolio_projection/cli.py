"""CLI entry point for a single projection (summary + yearly table)."""

import math
import sys

from portfolio_projection.config import parse_args
from portfolio_projection.params import ProjectionParameters
from portfolio_projection.projection import ProjectionResult, project
from portfolio_projection.report import render_parameters, render_summary, render_table

EXIT_NOT_CONVERGED = 2


def _print_header(params: ProjectionParameters, max_years: int):
    print("=" * 80)
    print(f"Financial projection (until target, at most {max_years} years)")
    print(render_parameters(params))
    print("=" * 80)
    print()


def _add_args(parser):
    parser.add_argument(
        "--summary-only", action="store_true",
        help="print only years-to-target and final value",
    )


def report_not_converged(result: ProjectionResult):
    final = result.final
    if math.isnan(final.portfolio):
        print(
            f"warning: portfolio became NaN in year {final.year};"
            " check for infinite or undefined rates",
            file=sys.stderr,
        )
        return
    print(
        f"warning: target not reached after {final.year} years"
        f" (final portfolio {final.portfolio:,.0f});"
        " check the return/income assumptions or raise --max-years",
        file=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Run one projection and print it."""
    params, max_years, args = parse_args("Financial projection calculator", _add_args, argv)

    result = project(params, max_years=max_years)

    if not args.summary_only:
        _print_header(params, max_years)
    print(render_summary(params, result))
    if not args.summary_only:
        print()
        print(render_table(result))

    if not result.converged:
        report_not_converged(result)
        return EXIT_NOT_CONVERGED
    return 0


if __name__ == "__main__":
    sys.exit(main())
