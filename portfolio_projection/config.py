"""TOML config loader with CLI > config > default resolution."""

import argparse
import re
import sys
import tomllib
from pathlib import Path
from typing import Callable

from portfolio_projection.params import ProjectionParameters
from portfolio_projection.projection import DEFAULT_MAX_YEARS

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "initial_portfolio": 20_000_000,
    "initial_income": 10_000_000,
    "initial_expenses": 1_200_000,
    "income_growth_rate": 0.125,
    "expense_growth_rate": 0.05,
    "xirr": 0.25,
    "target_value": 8_000_000_000,
    "initial_post_tax_income": 6_500_000,
    "inflation_rate": 0.06,
    "adjust_for_inflation": False,
    "max_years": DEFAULT_MAX_YEARS,
}

NUMERIC_KEYS = (
    "initial_portfolio",
    "initial_income",
    "initial_expenses",
    "income_growth_rate",
    "expense_growth_rate",
    "xirr",
    "target_value",
    "initial_post_tax_income",
    "inflation_rate",
)

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0", ""}


def _snake_case(key: str) -> str:
    """initialPostTaxIncome → initial_post_tax_income"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    # Flatten optional [projection] table; top-level keys win
    section = raw.pop("projection", {})
    if not isinstance(section, dict):
        print(f"Failed to read config file: {path}: 'projection' must be a table, got {section!r}", file=sys.stderr)
        raise SystemExit(1)
    for key, value in section.items():
        raw.setdefault(key, value)
    # Migrate dashboard-style camelCase keys (initialPortfolio, adjustForInflation, ...)
    for key in list(raw):
        snake = _snake_case(key)
        if snake != key:
            value = raw.pop(key)
            raw.setdefault(snake, value)
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared projection flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="config file path (default: config.toml)")
    parser.add_argument("--initial-portfolio", type=str, default=None, help=f"starting portfolio value (default: {d['initial_portfolio']:,})")
    parser.add_argument("--initial-income", type=str, default=None, help=f"gross annual income, shown only (default: {d['initial_income']:,})")
    parser.add_argument("--initial-expenses", type=str, default=None, help=f"annual expenses in year 0 (default: {d['initial_expenses']:,})")
    parser.add_argument("--initial-post-tax-income", type=str, default=None, help=f"annual post-tax income in year 0 (default: {d['initial_post_tax_income']:,})")
    parser.add_argument("--income-growth-rate", type=str, default=None, help=f"annual income growth, fraction or percent e.g. 12.5%% (default: {d['income_growth_rate']})")
    parser.add_argument("--expense-growth-rate", type=str, default=None, help=f"annual expense growth (default: {d['expense_growth_rate']})")
    parser.add_argument("--xirr", type=str, default=None, help=f"expected annual portfolio return (default: {d['xirr']})")
    parser.add_argument("--inflation-rate", type=str, default=None, help=f"annual inflation (default: {d['inflation_rate']})")
    parser.add_argument("--target-value", type=str, default=None, help=f"portfolio value that ends the projection (default: {d['target_value']:,})")
    parser.add_argument(
        "--adjust-for-inflation", action=argparse.BooleanOptionalAction, default=None,
        help="project in real terms (return and income growth net of inflation)",
    )
    parser.add_argument("--max-years", type=int, default=None, help=f"stop after this many years if the target is not reached (default: {d['max_years']})")
    return parser


def parse_number(key: str, value) -> float:
    """Parse a numeric config/CLI value.

    Accepts int/float, or strings like "2,00,00,000", "1_200_000", "12.5%".
    A trailing % divides by 100.
    """
    if isinstance(value, bool):
        raise ValueError(f"{key}: expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        s = value.strip().replace(",", "").replace("_", "")
        scale = 1.0
        if s.endswith("%"):
            s = s[:-1].strip()
            scale = 0.01
        try:
            return float(s) * scale
        except ValueError:
            raise ValueError(f"{key}: expected a number, got {value!r}") from None
    raise ValueError(f"{key}: expected a number, got {value!r}")


def parse_flag(key: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_WORDS:
            return True
        if s in _FALSE_WORDS:
            return False
    raise ValueError(f"{key}: expected true/false, got {value!r}")


def parse_max_years(value) -> int:
    years = parse_number("max_years", value)
    if not years.is_integer() or years < 0:
        raise ValueError(f"max_years: expected a non-negative integer, got {value!r}")
    return int(years)


def build_params(r: dict) -> ProjectionParameters:
    """Build ProjectionParameters from resolved config dict."""
    numbers = {key: parse_number(key, r[key]) for key in NUMERIC_KEYS}
    return ProjectionParameters(
        adjust_for_inflation=parse_flag("adjust_for_inflation", r["adjust_for_inflation"]),
        **numbers,
    )


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
    argv: list[str] | None = None,
) -> tuple[ProjectionParameters, int, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (params, max_years, namespace). Invalid values are reported via
    parser.error() (exit status 2).
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args(argv)
    config = load_config(args.config)
    r = resolve(args, config)
    try:
        params = build_params(r)
        max_years = parse_max_years(r["max_years"])
    except ValueError as e:
        parser.error(str(e))
    return params, max_years, args
